# Generated manually
from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("core", "0001_initial"),
        ("recetas", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Produccion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "tipo_produccion",
                    models.CharField(
                        choices=[
                            ("fabrica", "Fábrica (corrida interna repartida por sede)"),
                            ("pedido", "Pedido de cliente"),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("nombre", models.CharField(max_length=120)),
                ("fecha_pedido", models.DateField(default=django.utils.timezone.localdate)),
                ("fecha_entrega", models.DateField(blank=True, null=True)),
                ("numero_pedido", models.CharField(blank=True, max_length=20, null=True, unique=True)),
                (
                    "estado_produccion",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (1, "Pendiente"),
                            (2, "Por confirmar"),
                            (3, "En proceso"),
                            (4, "Terminada"),
                            (5, "Cancelada"),
                        ],
                        default=1,
                    ),
                ),
                (
                    "estado_pedido",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        choices=[(1, "Abierto"), (2, "Entregado"), (3, "Cancelado")],
                        null=True,
                    ),
                ),
                ("creado_en", models.DateTimeField(default=django.utils.timezone.now)),
                ("actualizado_en", models.DateTimeField(auto_now=True)),
                (
                    "creado_por",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="producciones_creadas",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"verbose_name": "Producción", "verbose_name_plural": "Producciones", "ordering": ["-id"]},
        ),
        migrations.CreateModel(
            name="DetalleProduccion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("cantidad", models.DecimalField(blank=True, decimal_places=3, max_digits=18, null=True)),
                ("produccion", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="detalles", to="produccion.produccion")),
                ("producto", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="detalles_produccion", to="recetas.producto")),
                ("sede", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="detalles_produccion", to="core.sede")),
            ],
            options={
                "verbose_name": "Detalle de producción",
                "verbose_name_plural": "Detalles de producción",
                "ordering": ["id"],
            },
        ),
    ]
