from django.contrib import admin
from .models import Insumo, UnidadMedida

@admin.register(UnidadMedida)
class UnidadMedidaAdmin(admin.ModelAdmin):
    list_display = ("codigo", "nombre")
    search_fields = ("codigo", "nombre")

@admin.register(Insumo)
class InsumoAdmin(admin.ModelAdmin):
    list_display = ("nombre", "unidad_base", "activo")
    search_fields = ("nombre", "nombre_normalizado")
    list_filter = ("activo", "unidad_base")
