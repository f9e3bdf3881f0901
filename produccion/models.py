from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import Sede
from recetas.models import Producto


class Produccion(models.Model):
    TIPO_FABRICA = "fabrica"
    TIPO_PEDIDO = "pedido"
    TIPO_CHOICES = [
        (TIPO_FABRICA, "Fábrica (corrida interna repartida por sede)"),
        (TIPO_PEDIDO, "Pedido de cliente"),
    ]

    ESTADO_PRODUCCION_PENDIENTE = 1
    ESTADO_PRODUCCION_POR_CONFIRMAR = 2
    ESTADO_PRODUCCION_EN_PROCESO = 3
    ESTADO_PRODUCCION_TERMINADA = 4
    ESTADO_PRODUCCION_CANCELADA = 5
    ESTADO_PRODUCCION_CHOICES = [
        (ESTADO_PRODUCCION_PENDIENTE, "Pendiente"),
        (ESTADO_PRODUCCION_POR_CONFIRMAR, "Por confirmar"),
        (ESTADO_PRODUCCION_EN_PROCESO, "En proceso"),
        (ESTADO_PRODUCCION_TERMINADA, "Terminada"),
        (ESTADO_PRODUCCION_CANCELADA, "Cancelada"),
    ]

    ESTADO_PEDIDO_ABIERTO = 1
    ESTADO_PEDIDO_ENTREGADO = 2
    ESTADO_PEDIDO_CANCELADO = 3
    ESTADO_PEDIDO_CHOICES = [
        (ESTADO_PEDIDO_ABIERTO, "Abierto"),
        (ESTADO_PEDIDO_ENTREGADO, "Entregado"),
        (ESTADO_PEDIDO_CANCELADO, "Cancelado"),
    ]

    tipo_produccion = models.CharField(max_length=20, choices=TIPO_CHOICES, db_index=True)
    nombre = models.CharField(max_length=120)
    fecha_pedido = models.DateField(default=timezone.localdate)
    fecha_entrega = models.DateField(null=True, blank=True)
    # Solo pedidos llevan folio; NULL no choca con el unique.
    numero_pedido = models.CharField(max_length=20, unique=True, null=True, blank=True)
    estado_produccion = models.PositiveSmallIntegerField(
        choices=ESTADO_PRODUCCION_CHOICES,
        default=ESTADO_PRODUCCION_PENDIENTE,
    )
    estado_pedido = models.PositiveSmallIntegerField(choices=ESTADO_PEDIDO_CHOICES, null=True, blank=True)
    creado_por = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="producciones_creadas",
    )
    creado_en = models.DateTimeField(default=timezone.now)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Producción"
        verbose_name_plural = "Producciones"
        ordering = ["-id"]

    @property
    def es_pedido(self) -> bool:
        return self.tipo_produccion == self.TIPO_PEDIDO

    def __str__(self) -> str:
        if self.numero_pedido:
            return f"{self.numero_pedido} · {self.nombre}"
        return f"{self.nombre} ({self.fecha_pedido})"


class DetalleProduccion(models.Model):
    produccion = models.ForeignKey(Produccion, related_name="detalles", on_delete=models.CASCADE)
    producto = models.ForeignKey(Producto, related_name="detalles_produccion", on_delete=models.PROTECT)
    cantidad = models.DecimalField(max_digits=18, decimal_places=3, null=True, blank=True)
    sede = models.ForeignKey(
        Sede,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="detalles_produccion",
    )

    class Meta:
        verbose_name = "Detalle de producción"
        verbose_name_plural = "Detalles de producción"
        ordering = ["id"]

    def __str__(self) -> str:
        sede = f" @ {self.sede.nombre}" if self.sede_id else ""
        return f"{self.producto.nombre} x {self.cantidad}{sede}"
