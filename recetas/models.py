from django.db import models
from django.utils import timezone

from maestros.models import Insumo, UnidadMedida

from .utils.normalizacion import normalizar_nombre


class Receta(models.Model):
    nombre = models.CharField(max_length=250)
    especificaciones = models.TextField(blank=True, default="")
    creado_en = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Receta"
        verbose_name_plural = "Recetas"
        ordering = ["nombre"]

    def __str__(self) -> str:
        return self.nombre


class LineaReceta(models.Model):
    receta = models.ForeignKey(Receta, related_name="lineas", on_delete=models.CASCADE)
    posicion = models.PositiveIntegerField(default=0)
    insumo = models.ForeignKey(Insumo, null=True, blank=True, on_delete=models.SET_NULL)
    cantidad = models.DecimalField(max_digits=18, decimal_places=6, null=True, blank=True)
    unidad = models.ForeignKey(UnidadMedida, null=True, blank=True, on_delete=models.SET_NULL)

    class Meta:
        verbose_name = "Línea de receta"
        verbose_name_plural = "Líneas de receta"
        ordering = ["posicion", "id"]

    def __str__(self) -> str:
        insumo = self.insumo.nombre if self.insumo_id else "Sin insumo"
        return f"{self.receta.nombre} · {insumo}"


class Producto(models.Model):
    nombre = models.CharField(max_length=250)
    nombre_normalizado = models.CharField(max_length=260, db_index=True)
    imagen_url = models.URLField(max_length=500, blank=True, default="")
    receta = models.ForeignKey(
        Receta,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="productos",
    )
    activo = models.BooleanField(default=True)
    creado_en = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Producto"
        verbose_name_plural = "Productos"
        ordering = ["nombre"]

    def save(self, *args, **kwargs):
        self.nombre_normalizado = normalizar_nombre(self.nombre)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.nombre


class VentaHistorica(models.Model):
    producto = models.ForeignKey(Producto, related_name="ventas_historicas", on_delete=models.CASCADE)
    sede = models.ForeignKey("core.Sede", related_name="ventas_historicas", on_delete=models.PROTECT)
    fecha = models.DateField(db_index=True)
    cantidad = models.DecimalField(max_digits=18, decimal_places=3, default=0)
    monto_total = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True)
    creado_en = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Venta histórica"
        verbose_name_plural = "Ventas históricas"
        ordering = ["-fecha", "producto__nombre"]
        unique_together = [("producto", "sede", "fecha")]

    def __str__(self) -> str:
        return f"{self.fecha} · {self.sede.nombre} · {self.producto.nombre} · {self.cantidad}"
