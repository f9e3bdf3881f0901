from django.db import models
from django.utils import timezone

from core.models import Sede
from recetas.models import Producto


class ExistenciaSede(models.Model):
    sede = models.ForeignKey(Sede, on_delete=models.PROTECT, related_name="existencias")
    producto = models.ForeignKey(Producto, on_delete=models.CASCADE, related_name="existencias_sede")
    stock_actual = models.DecimalField(max_digits=18, decimal_places=3, default=0)
    stock_minimo = models.DecimalField(max_digits=18, decimal_places=3, default=0)
    actualizado_en = models.DateTimeField(default=timezone.now)

    class Meta:
        verbose_name = "Existencia por sede"
        verbose_name_plural = "Existencias por sede"
        ordering = ["sede__nombre", "producto__nombre"]
        unique_together = [("sede", "producto")]

    def __str__(self):
        return f"{self.sede.nombre} · {self.producto.nombre}"
