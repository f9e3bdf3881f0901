import django_filters

from core.models import Sede
from produccion.models import Produccion


class SedeFilter(django_filters.FilterSet):
    nombre = django_filters.CharFilter(field_name="nombre", lookup_expr="icontains")
    activa = django_filters.BooleanFilter(field_name="activa")

    class Meta:
        model = Sede
        fields = ["nombre", "activa"]


class ProduccionFilter(django_filters.FilterSet):
    tipo_produccion = django_filters.CharFilter(method="filter_tipo")
    estado_produccion = django_filters.NumberFilter(field_name="estado_produccion")
    estado_pedido = django_filters.NumberFilter(field_name="estado_pedido")
    fecha_desde = django_filters.DateFilter(field_name="fecha_pedido", lookup_expr="gte")
    fecha_hasta = django_filters.DateFilter(field_name="fecha_pedido", lookup_expr="lte")

    class Meta:
        model = Produccion
        fields = ["tipo_produccion", "estado_produccion", "estado_pedido"]

    def filter_tipo(self, queryset, name, value):
        return queryset.filter(tipo_produccion=(value or "").strip().lower())
