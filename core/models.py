from django.db import models
from django.conf import settings
from django.utils import timezone

from recetas.utils.normalizacion import normalizar_nombre


class Sede(models.Model):
    nombre = models.CharField(max_length=20, unique=True)
    # "Norte" y "NORTE" son la misma sede para búsquedas por nombre.
    nombre_normalizado = models.CharField(max_length=60, unique=True)
    telefono = models.CharField(max_length=10)
    direccion = models.CharField(max_length=20)
    activa = models.BooleanField(default=True)
    imagen_url = models.URLField(max_length=500, blank=True, default="")
    creado_en = models.DateTimeField(default=timezone.now)
    actualizado_en = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Sede"
        verbose_name_plural = "Sedes"
        ordering = ["-id"]

    def save(self, *args, **kwargs):
        self.nombre_normalizado = normalizar_nombre(self.nombre)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.nombre


class AuditLog(models.Model):
    timestamp = models.DateTimeField(default=timezone.now)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL)
    action = models.CharField(max_length=64)  # CREATE/UPDATE/DELETE
    model = models.CharField(max_length=128)
    object_id = models.CharField(max_length=64, blank=True, default="")
    payload = models.JSONField(default=dict, blank=True)

    class Meta:
        verbose_name = "Bitácora (Audit)"
        verbose_name_plural = "Bitácora (Audit)"
        ordering = ["-timestamp"]

    def __str__(self) -> str:
        return f"{self.timestamp:%Y-%m-%d %H:%M} {self.action} {self.model} {self.object_id}"
