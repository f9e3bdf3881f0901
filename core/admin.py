from django.contrib import admin
from .models import Sede, AuditLog

@admin.register(Sede)
class SedeAdmin(admin.ModelAdmin):
    list_display = ("nombre", "telefono", "direccion", "activa")
    search_fields = ("nombre", "direccion")
    list_filter = ("activa",)
    readonly_fields = ("nombre_normalizado",)

@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "user", "action", "model", "object_id")
    list_filter = ("action", "model")
    search_fields = ("model", "object_id", "user__username")
    readonly_fields = ("timestamp", "user", "action", "model", "object_id", "payload")
