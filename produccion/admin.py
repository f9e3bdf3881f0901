from django.contrib import admin
from .models import DetalleProduccion, Produccion

class DetalleProduccionInline(admin.TabularInline):
    model = DetalleProduccion
    extra = 0
    fields = ("producto", "cantidad", "sede")

@admin.register(Produccion)
class ProduccionAdmin(admin.ModelAdmin):
    list_display = ("id", "tipo_produccion", "nombre", "numero_pedido", "fecha_pedido", "fecha_entrega", "estado_produccion")
    list_filter = ("tipo_produccion", "estado_produccion", "estado_pedido")
    search_fields = ("nombre", "numero_pedido")
    readonly_fields = ("numero_pedido", "creado_por", "creado_en", "actualizado_en")
    inlines = [DetalleProduccionInline]
