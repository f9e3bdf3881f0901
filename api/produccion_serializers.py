from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from produccion.models import Produccion
from produccion.services import ProduccionInvalida, normalizar_tipo
from produccion.utils.agrupacion import resumir_detalles


class InsumoRecetaSerializer(serializers.Serializer):
    id = serializers.IntegerField(allow_null=True)
    nombre = serializers.CharField()
    cantidad = serializers.FloatField()
    unidad = serializers.CharField()


class RecetaResumenSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    nombre = serializers.CharField()
    especificaciones = serializers.CharField(allow_blank=True)
    insumos = InsumoRecetaSerializer(many=True)


class ProductoResumenSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    nombre = serializers.CharField()
    imagen = serializers.CharField(allow_null=True)
    cantidad_total = serializers.FloatField()
    cantidades_por_sede = serializers.DictField(child=serializers.FloatField())
    receta = RecetaResumenSerializer(allow_null=True)
    insumos = InsumoRecetaSerializer(many=True)


class ProduccionSerializer(serializers.ModelSerializer):
    estado_produccion_display = serializers.CharField(source="get_estado_produccion_display", read_only=True)
    estado_pedido_display = serializers.CharField(source="get_estado_pedido_display", read_only=True, allow_null=True)
    detalles = serializers.SerializerMethodField()
    sedes_disponibles = serializers.SerializerMethodField()

    class Meta:
        model = Produccion
        fields = [
            "id",
            "tipo_produccion",
            "nombre",
            "fecha_pedido",
            "fecha_entrega",
            "numero_pedido",
            "estado_produccion",
            "estado_produccion_display",
            "estado_pedido",
            "estado_pedido_display",
            "creado_en",
            "actualizado_en",
            "detalles",
            "sedes_disponibles",
        ]
        read_only_fields = fields

    def get_detalles(self, obj: Produccion):
        return ProductoResumenSerializer(resumir_detalles(obj.detalles.all()), many=True).data

    def get_sedes_disponibles(self, obj: Produccion) -> list[str]:
        return list(self.context.get("sedes_disponibles") or [])


class ProduccionProductoInputSerializer(serializers.Serializer):
    id = serializers.IntegerField(min_value=1)
    cantidad = serializers.DecimalField(
        max_digits=18,
        decimal_places=3,
        min_value=Decimal("0.001"),
        required=False,
        allow_null=True,
    )
    sede = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    cantidades_por_sede = serializers.DictField(
        child=serializers.DecimalField(max_digits=18, decimal_places=3, min_value=Decimal("0"), allow_null=True),
        required=False,
        allow_null=True,
    )


class ProduccionCreateSerializer(serializers.Serializer):
    tipo_produccion = serializers.CharField()
    nombre = serializers.CharField(max_length=120)
    fecha_pedido = serializers.DateField(required=False, allow_null=True)
    fecha_entrega = serializers.DateField(required=False, allow_null=True)
    productos = ProduccionProductoInputSerializer(many=True, required=False)

    def validate_tipo_produccion(self, value: str) -> str:
        try:
            return normalizar_tipo(value)
        except ProduccionInvalida as exc:
            raise serializers.ValidationError(str(exc)) from exc


class ProduccionUpdateSerializer(serializers.Serializer):
    nombre = serializers.CharField(max_length=120, required=False)
    fecha_entrega = serializers.DateField(required=False, allow_null=True)
    estado_produccion = serializers.ChoiceField(choices=Produccion.ESTADO_PRODUCCION_CHOICES, required=False)
    estado_pedido = serializers.ChoiceField(
        choices=Produccion.ESTADO_PEDIDO_CHOICES,
        required=False,
        allow_null=True,
    )

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Envía al menos un campo a actualizar.")
        return attrs
