from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.access import can_manage_sedes, can_view_sedes
from core.audit import log_event
from core.models import Sede
from core.utils.imagenes import (
    CODIGO_TIPO_INVALIDO,
    TIPOS_IMAGEN_PERMITIDOS,
    ImagenInvalida,
    ImagenUploadError,
    subir_imagen,
    validar_archivos_imagen,
)

from .filters import SedeFilter
from .sedes_serializers import SedeSerializer

logger = logging.getLogger(__name__)

MENSAJE_DUPLICADO = "Ya existe una sede con estos datos"


class _SedesBaseView(APIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    @staticmethod
    def _imagen_rechazada(exc: ImagenInvalida) -> Response:
        body = {"detail": exc.mensaje, "code": exc.codigo}
        if exc.codigo == CODIGO_TIPO_INVALIDO:
            body["tipos_permitidos"] = list(TIPOS_IMAGEN_PERMITIDOS)
        return Response(body, status=status.HTTP_400_BAD_REQUEST)

    @staticmethod
    def _subir_imagen_opcional(archivo, actual: str) -> str:
        if archivo is None:
            return actual
        try:
            return subir_imagen(archivo)
        except ImagenUploadError as exc:
            # La sede se guarda igual; solo se queda sin imagen nueva.
            logger.warning("No se pudo subir la imagen de la sede: %s", exc)
            return actual

    @staticmethod
    def _duplicada() -> Response:
        return Response(
            {"detail": MENSAJE_DUPLICADO, "code": "DATOS_DUPLICADOS"},
            status=status.HTTP_400_BAD_REQUEST,
        )


class SedesView(_SedesBaseView):
    def get(self, request):
        if not can_view_sedes(request.user):
            return Response({"detail": "No tienes permisos para consultar sedes."}, status=status.HTTP_403_FORBIDDEN)

        filtro = SedeFilter(request.query_params, queryset=Sede.objects.all())
        if not filtro.is_valid():
            return Response(filtro.errors, status=status.HTTP_400_BAD_REQUEST)

        rows = list(filtro.qs.order_by("-id"))
        return Response(SedeSerializer(rows, many=True).data, status=status.HTTP_200_OK)

    def post(self, request):
        if not can_manage_sedes(request.user):
            return Response({"detail": "No tienes permisos para crear sedes."}, status=status.HTTP_403_FORBIDDEN)

        try:
            archivo = validar_archivos_imagen(request.FILES)
        except ImagenInvalida as exc:
            return self._imagen_rechazada(exc)

        serializer = SedeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        imagen_url = self._subir_imagen_opcional(archivo, "")
        try:
            with transaction.atomic():
                sede = serializer.save(imagen_url=imagen_url)
        except IntegrityError:
            return self._duplicada()

        log_event(
            request.user,
            "CREATE",
            "core.Sede",
            str(sede.id),
            {"nombre": sede.nombre, "con_imagen": bool(sede.imagen_url)},
        )
        return Response(SedeSerializer(sede).data, status=status.HTTP_201_CREATED)


class SedeDetailView(_SedesBaseView):
    def get(self, request, sede_id: int):
        if not can_view_sedes(request.user):
            return Response({"detail": "No tienes permisos para consultar sedes."}, status=status.HTTP_403_FORBIDDEN)

        sede = get_object_or_404(Sede, pk=sede_id)
        return Response(SedeSerializer(sede).data, status=status.HTTP_200_OK)

    def put(self, request, sede_id: int):
        if not can_manage_sedes(request.user):
            return Response({"detail": "No tienes permisos para editar sedes."}, status=status.HTTP_403_FORBIDDEN)

        sede = get_object_or_404(Sede, pk=sede_id)
        try:
            archivo = validar_archivos_imagen(request.FILES)
        except ImagenInvalida as exc:
            return self._imagen_rechazada(exc)

        serializer = SedeSerializer(sede, data=request.data)
        serializer.is_valid(raise_exception=True)

        imagen_anterior = sede.imagen_url
        imagen_url = self._subir_imagen_opcional(archivo, imagen_anterior)
        try:
            with transaction.atomic():
                sede = serializer.save(imagen_url=imagen_url)
        except IntegrityError:
            return self._duplicada()

        log_event(
            request.user,
            "UPDATE",
            "core.Sede",
            str(sede.id),
            {"nombre": sede.nombre, "imagen_actualizada": imagen_url != imagen_anterior},
        )
        return Response(SedeSerializer(sede).data, status=status.HTTP_200_OK)

    def delete(self, request, sede_id: int):
        if not can_manage_sedes(request.user):
            return Response({"detail": "No tienes permisos para eliminar sedes."}, status=status.HTTP_403_FORBIDDEN)

        sede = get_object_or_404(Sede, pk=sede_id)
        eliminada = {"id": sede.id, "nombre": sede.nombre}
        try:
            with transaction.atomic():
                sede.delete()
        except IntegrityError:
            # ProtectedError hereda de IntegrityError: inventarios, ventas o producción.
            logger.info("Sede %s no eliminada: tiene registros asociados", eliminada["id"])
            return Response(
                {
                    "detail": "No se puede eliminar la sede porque tiene registros asociados (inventarios, ventas o producción).",
                    "code": "SEDE_CON_REGISTROS",
                    "sugerencia": "Intenta desactivarla en lugar de eliminarla.",
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        log_event(request.user, "DELETE", "core.Sede", str(eliminada["id"]), eliminada)
        return Response(
            {"detail": "Sede eliminada correctamente", "sede_eliminada": eliminada},
            status=status.HTTP_200_OK,
        )
