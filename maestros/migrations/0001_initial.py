# Generated manually
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="UnidadMedida",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("codigo", models.CharField(max_length=20, unique=True)),
                ("nombre", models.CharField(max_length=60)),
            ],
            options={
                "verbose_name": "Unidad de medida",
                "verbose_name_plural": "Unidades de medida",
                "ordering": ["codigo"],
            },
        ),
        migrations.CreateModel(
            name="Insumo",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=250)),
                ("nombre_normalizado", models.CharField(db_index=True, max_length=260)),
                ("activo", models.BooleanField(default=True)),
                ("creado_en", models.DateTimeField(default=django.utils.timezone.now)),
                ("unidad_base", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="maestros.unidadmedida")),
            ],
            options={"verbose_name": "Insumo", "verbose_name_plural": "Insumos", "ordering": ["nombre"]},
        ),
    ]
