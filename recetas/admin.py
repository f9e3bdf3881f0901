from django.contrib import admin
from .models import LineaReceta, Producto, Receta, VentaHistorica

class LineaRecetaInline(admin.TabularInline):
    model = LineaReceta
    extra = 0
    fields = ("posicion", "insumo", "cantidad", "unidad")

@admin.register(Receta)
class RecetaAdmin(admin.ModelAdmin):
    list_display = ("nombre", "creado_en")
    search_fields = ("nombre",)
    inlines = [LineaRecetaInline]

@admin.register(Producto)
class ProductoAdmin(admin.ModelAdmin):
    list_display = ("nombre", "receta", "activo")
    search_fields = ("nombre", "nombre_normalizado")
    list_filter = ("activo",)

@admin.register(VentaHistorica)
class VentaHistoricaAdmin(admin.ModelAdmin):
    list_display = ("fecha", "sede", "producto", "cantidad", "monto_total")
    list_filter = ("sede", "fecha")
    search_fields = ("producto__nombre", "sede__nombre")
