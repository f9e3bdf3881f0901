from django.contrib import admin
from .models import ExistenciaSede

@admin.register(ExistenciaSede)
class ExistenciaSedeAdmin(admin.ModelAdmin):
    list_display = ("sede", "producto", "stock_actual", "stock_minimo", "actualizado_en")
    list_filter = ("sede",)
    search_fields = ("producto__nombre", "sede__nombre")
