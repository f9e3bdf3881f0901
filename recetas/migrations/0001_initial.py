# Generated manually
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        ("maestros", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Receta",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=250)),
                ("especificaciones", models.TextField(blank=True, default="")),
                ("creado_en", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={"verbose_name": "Receta", "verbose_name_plural": "Recetas", "ordering": ["nombre"]},
        ),
        migrations.CreateModel(
            name="LineaReceta",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("posicion", models.PositiveIntegerField(default=0)),
                ("cantidad", models.DecimalField(blank=True, decimal_places=6, max_digits=18, null=True)),
                ("insumo", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="maestros.insumo")),
                ("receta", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lineas", to="recetas.receta")),
                ("unidad", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to="maestros.unidadmedida")),
            ],
            options={
                "verbose_name": "Línea de receta",
                "verbose_name_plural": "Líneas de receta",
                "ordering": ["posicion", "id"],
            },
        ),
        migrations.CreateModel(
            name="Producto",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=250)),
                ("nombre_normalizado", models.CharField(db_index=True, max_length=260)),
                ("imagen_url", models.URLField(blank=True, default="", max_length=500)),
                ("activo", models.BooleanField(default=True)),
                ("creado_en", models.DateTimeField(default=django.utils.timezone.now)),
                ("receta", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="productos", to="recetas.receta")),
            ],
            options={"verbose_name": "Producto", "verbose_name_plural": "Productos", "ordering": ["nombre"]},
        ),
        migrations.CreateModel(
            name="VentaHistorica",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("fecha", models.DateField(db_index=True)),
                ("cantidad", models.DecimalField(decimal_places=3, default=0, max_digits=18)),
                ("monto_total", models.DecimalField(blank=True, decimal_places=2, max_digits=18, null=True)),
                ("creado_en", models.DateTimeField(default=django.utils.timezone.now)),
                ("producto", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ventas_historicas", to="recetas.producto")),
                ("sede", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="ventas_historicas", to="core.sede")),
            ],
            options={
                "verbose_name": "Venta histórica",
                "verbose_name_plural": "Ventas históricas",
                "ordering": ["-fecha", "producto__nombre"],
                "unique_together": {("producto", "sede", "fecha")},
            },
        ),
    ]
