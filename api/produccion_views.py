from __future__ import annotations

import logging

from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.access import can_manage_produccion, can_view_produccion
from core.audit import log_event
from produccion.models import DetalleProduccion, Produccion
from produccion.services import (
    ProduccionInvalida,
    actualizar_encabezado,
    crear_produccion,
    nombres_sedes_activas,
)

from .filters import ProduccionFilter
from .produccion_serializers import (
    ProduccionCreateSerializer,
    ProduccionSerializer,
    ProduccionUpdateSerializer,
)

logger = logging.getLogger(__name__)


def _producciones_queryset():
    detalles = (
        DetalleProduccion.objects.select_related("producto__receta", "sede")
        .prefetch_related("producto__receta__lineas__insumo", "producto__receta__lineas__unidad")
        .order_by("id")
    )
    return Produccion.objects.prefetch_related(Prefetch("detalles", queryset=detalles))


class _ProduccionBaseView(APIView):
    permission_classes = [IsAuthenticated]

    @staticmethod
    def _serializar(data, *, many: bool = False):
        context = {"sedes_disponibles": nombres_sedes_activas()}
        return ProduccionSerializer(data, many=many, context=context).data


class ProduccionesView(_ProduccionBaseView):
    def get(self, request):
        if not can_view_produccion(request.user):
            return Response({"detail": "No tienes permisos para consultar producción."}, status=status.HTTP_403_FORBIDDEN)

        filtro = ProduccionFilter(request.query_params, queryset=_producciones_queryset())
        if not filtro.is_valid():
            return Response(filtro.errors, status=status.HTTP_400_BAD_REQUEST)

        rows = list(filtro.qs.order_by("-id"))
        return Response(self._serializar(rows, many=True), status=status.HTTP_200_OK)

    def post(self, request):
        if not can_manage_produccion(request.user):
            return Response({"detail": "No tienes permisos para crear producciones."}, status=status.HTTP_403_FORBIDDEN)

        serializer = ProduccionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data

        try:
            produccion = crear_produccion(
                tipo_produccion=payload["tipo_produccion"],
                nombre=payload["nombre"],
                fecha_pedido=payload.get("fecha_pedido"),
                fecha_entrega=payload.get("fecha_entrega"),
                productos=payload.get("productos") or [],
                usuario=request.user,
            )
        except ProduccionInvalida as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        produccion = _producciones_queryset().get(pk=produccion.pk)
        log_event(
            request.user,
            "CREATE",
            "produccion.Produccion",
            str(produccion.id),
            {
                "tipo": produccion.tipo_produccion,
                "nombre": produccion.nombre,
                "numero_pedido": produccion.numero_pedido,
                "lineas": len(produccion.detalles.all()),
            },
        )
        return Response(self._serializar(produccion), status=status.HTTP_201_CREATED)


class ProduccionDetailView(_ProduccionBaseView):
    def get(self, request, produccion_id: int):
        if not can_view_produccion(request.user):
            return Response({"detail": "No tienes permisos para consultar producción."}, status=status.HTTP_403_FORBIDDEN)

        produccion = get_object_or_404(_producciones_queryset(), pk=produccion_id)
        return Response(self._serializar(produccion), status=status.HTTP_200_OK)

    def patch(self, request, produccion_id: int):
        if not can_manage_produccion(request.user):
            return Response({"detail": "No tienes permisos para editar producciones."}, status=status.HTTP_403_FORBIDDEN)

        produccion = get_object_or_404(Produccion, pk=produccion_id)
        serializer = ProduccionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            cambios = actualizar_encabezado(produccion, serializer.validated_data)
        except ProduccionInvalida as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        if cambios:
            log_event(request.user, "UPDATE", "produccion.Produccion", str(produccion.id), cambios)
        produccion = _producciones_queryset().get(pk=produccion.pk)
        return Response(self._serializar(produccion), status=status.HTTP_200_OK)

    def delete(self, request, produccion_id: int):
        if not can_manage_produccion(request.user):
            return Response({"detail": "No tienes permisos para eliminar producciones."}, status=status.HTTP_403_FORBIDDEN)

        produccion = get_object_or_404(Produccion, pk=produccion_id)
        resumen = {"id": produccion.id, "nombre": produccion.nombre, "numero_pedido": produccion.numero_pedido}
        produccion.delete()
        logger.info("Producción %s eliminada", resumen["id"])
        log_event(request.user, "DELETE", "produccion.Produccion", str(resumen["id"]), resumen)
        return Response({"detail": "Producción eliminada correctamente"}, status=status.HTTP_200_OK)
