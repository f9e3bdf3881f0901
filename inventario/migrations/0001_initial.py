# Generated manually
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("recetas", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ExistenciaSede",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("stock_actual", models.DecimalField(decimal_places=3, default=0, max_digits=18)),
                ("stock_minimo", models.DecimalField(decimal_places=3, default=0, max_digits=18)),
                ("actualizado_en", models.DateTimeField(default=django.utils.timezone.now)),
                ("producto", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="existencias_sede", to="recetas.producto")),
                ("sede", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="existencias", to="core.sede")),
            ],
            options={
                "verbose_name": "Existencia por sede",
                "verbose_name_plural": "Existencias por sede",
                "ordering": ["sede__nombre", "producto__nombre"],
                "unique_together": {("sede", "producto")},
            },
        ),
    ]
