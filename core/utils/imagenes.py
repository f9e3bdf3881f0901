from __future__ import annotations

import logging

import cloudinary
import cloudinary.uploader
from django.conf import settings

logger = logging.getLogger(__name__)

TIPOS_IMAGEN_PERMITIDOS = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")

CODIGO_TAMANO_EXCEDIDO = "LIMIT_FILE_SIZE"
CODIGO_TIPO_INVALIDO = "INVALID_FILE_TYPE"
CODIGO_CAMPO_INESPERADO = "LIMIT_UNEXPECTED_FILE"

# Cloudinary recorta en servidor; no guardamos originales enormes.
TRANSFORMACION_SEDE = [{"width": 800, "height": 600, "crop": "limit", "quality": "auto:good"}]


class ImagenInvalida(ValueError):
    def __init__(self, mensaje: str, codigo: str):
        super().__init__(mensaje)
        self.mensaje = mensaje
        self.codigo = codigo


class ImagenUploadError(RuntimeError):
    pass


def _max_bytes() -> int:
    return int(getattr(settings, "SEDE_IMAGEN_MAX_BYTES", 5 * 1024 * 1024))


def validar_archivos_imagen(files, campo: str = "imagen"):
    """
    Revisa los archivos del request antes de tocar la sede.

    Regresa el archivo del campo esperado (o None) y lanza ImagenInvalida si
    llega otro campo de archivo, si el tipo no es imagen o si excede el tamaño.
    """
    inesperados = [name for name in files.keys() if name != campo]
    if inesperados:
        raise ImagenInvalida(
            f'Campo de archivo inesperado. Usa el campo "{campo}" en FormData.',
            CODIGO_CAMPO_INESPERADO,
        )

    archivo = files.get(campo)
    if archivo is None:
        return None

    content_type = (getattr(archivo, "content_type", "") or "").lower()
    if content_type not in TIPOS_IMAGEN_PERMITIDOS:
        raise ImagenInvalida(
            f"Tipo de archivo no permitido: {content_type or 'desconocido'}. Solo se aceptan: JPG, PNG, GIF, WebP",
            CODIGO_TIPO_INVALIDO,
        )

    max_bytes = _max_bytes()
    if (archivo.size or 0) > max_bytes:
        raise ImagenInvalida(
            f"El archivo es demasiado grande. Tamaño máximo: {max_bytes // (1024 * 1024)}MB",
            CODIGO_TAMANO_EXCEDIDO,
        )
    return archivo


def cloudinary_configurado() -> bool:
    return all(
        (getattr(settings, name, "") or "").strip()
        for name in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET")
    )


def subir_imagen(archivo, folder: str | None = None) -> str:
    """Sube la imagen a Cloudinary y regresa su secure_url."""
    if not cloudinary_configurado():
        raise ImagenUploadError("Configuración de Cloudinary incompleta")

    folder = folder or settings.CLOUDINARY_SEDES_FOLDER
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )
    logger.info("Subiendo imagen a Cloudinary folder=%s nombre=%s", folder, getattr(archivo, "name", ""))
    try:
        result = cloudinary.uploader.upload(archivo, folder=folder, transformation=TRANSFORMACION_SEDE)
    except Exception as exc:
        raise ImagenUploadError(f"Error al subir imagen a Cloudinary: {exc}") from exc

    url = (result or {}).get("secure_url")
    if not url:
        raise ImagenUploadError("Cloudinary no regresó secure_url.")
    return url
