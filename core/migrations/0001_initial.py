# Generated manually
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Sede",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=20, unique=True)),
                ("nombre_normalizado", models.CharField(max_length=60, unique=True)),
                ("telefono", models.CharField(max_length=10)),
                ("direccion", models.CharField(max_length=20)),
                ("activa", models.BooleanField(default=True)),
                ("imagen_url", models.URLField(blank=True, default="", max_length=500)),
                ("creado_en", models.DateTimeField(default=django.utils.timezone.now)),
                ("actualizado_en", models.DateTimeField(auto_now=True)),
            ],
            options={"verbose_name": "Sede", "verbose_name_plural": "Sedes", "ordering": ["-id"]},
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                ("action", models.CharField(max_length=64)),
                ("model", models.CharField(max_length=128)),
                ("object_id", models.CharField(blank=True, default="", max_length=64)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Bitácora (Audit)",
                "verbose_name_plural": "Bitácora (Audit)",
                "ordering": ["-timestamp"],
            },
        ),
    ]
