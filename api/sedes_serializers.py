from __future__ import annotations

from rest_framework import serializers

from core.models import Sede
from core.validators import (
    DIRECCION_SEDE_MAX,
    DIRECCION_SEDE_MIN,
    NOMBRE_SEDE_MAX,
    NOMBRE_SEDE_MIN,
    limpiar_telefono,
    longitud_valida,
    telefono_valido,
)
from recetas.utils.normalizacion import normalizar_nombre


class SedeSerializer(serializers.ModelSerializer):
    nombre = serializers.CharField()
    telefono = serializers.CharField()
    direccion = serializers.CharField()
    activa = serializers.BooleanField(required=False)

    class Meta:
        model = Sede
        fields = [
            "id",
            "nombre",
            "telefono",
            "direccion",
            "activa",
            "imagen_url",
            "creado_en",
            "actualizado_en",
        ]
        read_only_fields = ["id", "imagen_url", "creado_en", "actualizado_en"]

    def validate_nombre(self, value: str) -> str:
        value = value.strip()
        if not longitud_valida(value, NOMBRE_SEDE_MIN, NOMBRE_SEDE_MAX):
            raise serializers.ValidationError(
                f"El nombre debe tener entre {NOMBRE_SEDE_MIN} y {NOMBRE_SEDE_MAX} caracteres."
            )

        duplicadas = Sede.objects.filter(nombre_normalizado=normalizar_nombre(value))
        if self.instance is not None:
            duplicadas = duplicadas.exclude(pk=self.instance.pk)
        if duplicadas.exists():
            raise serializers.ValidationError("Ya existe una sede con ese nombre.")
        return value

    def validate_telefono(self, value: str) -> str:
        if not telefono_valido(value):
            raise serializers.ValidationError(
                "Teléfono inválido. Debe ser un número colombiano de 10 dígitos comenzando con 3 (ejemplo: 3001234567)."
            )
        return limpiar_telefono(value)

    def validate_direccion(self, value: str) -> str:
        value = value.strip()
        if not longitud_valida(value, DIRECCION_SEDE_MIN, DIRECCION_SEDE_MAX):
            raise serializers.ValidationError(
                f"La dirección debe tener entre {DIRECCION_SEDE_MIN} y {DIRECCION_SEDE_MAX} caracteres."
            )
        return value

    def validate(self, attrs):
        # Un formulario sin "activa" no debe reactivar ni desactivar la sede.
        if "activa" not in self.initial_data:
            if self.instance is not None:
                attrs.pop("activa", None)
            else:
                attrs["activa"] = True
        return attrs
