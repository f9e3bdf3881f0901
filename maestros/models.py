from django.db import models
from django.utils import timezone

from recetas.utils.normalizacion import normalizar_nombre


class UnidadMedida(models.Model):
    codigo = models.CharField(max_length=20, unique=True)  # kg, g, lt, ml, pza, etc
    nombre = models.CharField(max_length=60)

    class Meta:
        verbose_name = "Unidad de medida"
        verbose_name_plural = "Unidades de medida"
        ordering = ["codigo"]

    def __str__(self) -> str:
        return self.codigo


class Insumo(models.Model):
    nombre = models.CharField(max_length=250)
    nombre_normalizado = models.CharField(max_length=260, db_index=True)
    unidad_base = models.ForeignKey(UnidadMedida, null=True, blank=True, on_delete=models.SET_NULL)
    activo = models.BooleanField(default=True)
    creado_en = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Insumo"
        verbose_name_plural = "Insumos"
        ordering = ["nombre"]

    def save(self, *args, **kwargs):
        self.nombre_normalizado = normalizar_nombre(self.nombre)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.nombre


def seed_unidades_basicas():
    # Crea unidades base típicas (safe to call multiple times)
    units = [
        ("g", "Gramo"),
        ("kg", "Kilogramo"),
        ("ml", "Mililitro"),
        ("lt", "Litro"),
        ("pza", "Pieza"),
        ("unidad", "Unidad"),
    ]
    for code, name in units:
        UnidadMedida.objects.get_or_create(codigo=code, defaults={"nombre": name})
