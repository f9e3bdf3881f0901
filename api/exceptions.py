from __future__ import annotations

import logging

from django.db import IntegrityError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Deja a DRF manejar sus excepciones; lo que quede sin manejar se responde
    como JSON en lugar de la página 500 de Django.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "?"

    if isinstance(exc, ProtectedError):
        logger.warning("%s: borrado bloqueado por registros relacionados", view_name)
        return Response(
            {
                "detail": "No se puede eliminar el registro porque tiene registros asociados.",
                "code": "REGISTROS_ASOCIADOS",
            },
            status=status.HTTP_400_BAD_REQUEST,
        )
    if isinstance(exc, IntegrityError):
        logger.warning("%s: violación de integridad: %s", view_name, exc)
        return Response(
            {"detail": "Los datos violan una restricción de la base de datos.", "code": "INTEGRIDAD", "error": str(exc)},
            status=status.HTTP_400_BAD_REQUEST,
        )

    logger.exception("%s: error no controlado", view_name, exc_info=exc)
    return Response(
        {"detail": "Error interno del servidor", "error": str(exc)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
