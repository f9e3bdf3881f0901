from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import IntegerField
from django.db.models.functions import Cast, Substr
from django.utils import timezone

from core.models import Sede
from recetas.models import Producto
from recetas.utils.normalizacion import normalizar_nombre

from .models import DetalleProduccion, Produccion

logger = logging.getLogger(__name__)

PREFIJO_PEDIDO = "P-"
_PATRON_PEDIDO = re.compile(r"^P-(\d+)$")
MAX_INTENTOS_FOLIO = 5
TIPOS_VALIDOS = (Produccion.TIPO_FABRICA, Produccion.TIPO_PEDIDO)


class ProduccionInvalida(ValueError):
    pass


@dataclass(frozen=True)
class LineaNueva:
    producto_id: int
    cantidad: Decimal
    sede: Sede | None = None


def normalizar_tipo(tipo: str | None) -> str:
    valor = (tipo or "").strip().lower()
    if not valor:
        raise ProduccionInvalida("Datos incompletos: el tipo de producción es obligatorio.")
    if valor not in TIPOS_VALIDOS:
        raise ProduccionInvalida(f"Tipo de producción inválido: {tipo}. Usa 'fabrica' o 'pedido'.")
    return valor


def siguiente_numero_pedido(codigos: Iterable[str | None]) -> str:
    mayor = 0
    for codigo in codigos:
        match = _PATRON_PEDIDO.match((codigo or "").strip())
        if match:
            mayor = max(mayor, int(match.group(1)))
    return f"{PREFIJO_PEDIDO}{mayor + 1:03d}"


def numero_pedido_respaldo() -> str:
    millis = int(timezone.now().timestamp() * 1000)
    return f"{PREFIJO_PEDIDO}{str(millis)[-3:]}"


def generar_numero_pedido() -> str:
    try:
        ultimo = (
            Produccion.objects.filter(numero_pedido__regex=_PATRON_PEDIDO.pattern)
            .annotate(consecutivo=Cast(Substr("numero_pedido", len(PREFIJO_PEDIDO) + 1), IntegerField()))
            .order_by("-consecutivo")
            .values_list("numero_pedido", flat=True)
            .first()
        )
    except DatabaseError:
        logger.exception("No se pudo consultar el último número de pedido; se usa folio de respaldo.")
        return numero_pedido_respaldo()
    return siguiente_numero_pedido([ultimo])


def indice_sedes_activas() -> dict[str, Sede]:
    """Sedes activas indexadas por nombre normalizado y por id (el id gana si chocan)."""
    sedes = list(Sede.objects.filter(activa=True))
    indice: dict[str, Sede] = {normalizar_nombre(sede.nombre): sede for sede in sedes}
    indice.update({str(sede.id): sede for sede in sedes})
    return indice


def nombres_sedes_activas() -> list[str]:
    try:
        return list(Sede.objects.filter(activa=True).order_by("nombre").values_list("nombre", flat=True))
    except DatabaseError:
        logger.exception("No se pudieron obtener las sedes activas.")
        return []


def construir_lineas(tipo: str, productos: Iterable[dict[str, Any]], sedes: dict[str, Sede]) -> list[LineaNueva]:
    """
    Convierte los productos del request en líneas de detalle.

    Fábrica con `cantidades_por_sede`: una línea por sede con cantidad > 0.
    Todo lo demás: una línea por producto, cantidad 1 si no viene.
    """
    lineas: list[LineaNueva] = []
    desconocidas: list[str] = []

    for prod in productos:
        producto_id = int(prod["id"])
        reparto = prod.get("cantidades_por_sede")

        if tipo == Produccion.TIPO_FABRICA and reparto is not None:
            for clave, cantidad in reparto.items():
                if cantidad is None or Decimal(str(cantidad)) <= 0:
                    continue
                sede = sedes.get(normalizar_nombre(clave))
                if sede is None:
                    desconocidas.append(str(clave))
                    continue
                lineas.append(LineaNueva(producto_id=producto_id, cantidad=Decimal(str(cantidad)), sede=sede))
            continue

        cantidad = prod.get("cantidad")
        sede = None
        clave_sede = prod.get("sede")
        if clave_sede not in (None, ""):
            sede = sedes.get(normalizar_nombre(clave_sede))
            if sede is None:
                desconocidas.append(str(clave_sede))
                continue
        lineas.append(
            LineaNueva(
                producto_id=producto_id,
                cantidad=Decimal("1") if cantidad is None else Decimal(str(cantidad)),
                sede=sede,
            )
        )

    if desconocidas:
        raise ProduccionInvalida(
            "Sedes desconocidas o inactivas: " + ", ".join(sorted(set(desconocidas)))
        )
    return lineas


def _validar_productos(ids: Iterable[int]) -> None:
    solicitados = {int(pk) for pk in ids}
    if not solicitados:
        return
    existentes = set(Producto.objects.filter(id__in=solicitados).values_list("id", flat=True))
    faltantes = sorted(solicitados - existentes)
    if faltantes:
        raise ProduccionInvalida("Productos no encontrados: " + ", ".join(str(pk) for pk in faltantes))


def crear_produccion(
    *,
    tipo_produccion: str,
    nombre: str,
    fecha_pedido: date | None = None,
    fecha_entrega: date | None = None,
    productos: Iterable[dict[str, Any]] | None = None,
    usuario=None,
) -> Produccion:
    tipo = normalizar_tipo(tipo_produccion)
    nombre = (nombre or "").strip()
    if not nombre:
        raise ProduccionInvalida("Datos incompletos: el nombre de la producción es obligatorio.")

    productos = list(productos or [])
    _validar_productos(prod["id"] for prod in productos)
    lineas = construir_lineas(tipo, productos, indice_sedes_activas())

    es_pedido = tipo == Produccion.TIPO_PEDIDO
    intentos = MAX_INTENTOS_FOLIO if es_pedido else 1
    for intento in range(1, intentos + 1):
        numero = generar_numero_pedido() if es_pedido else None
        try:
            with transaction.atomic():
                produccion = Produccion.objects.create(
                    tipo_produccion=tipo,
                    nombre=nombre,
                    fecha_pedido=fecha_pedido or timezone.localdate(),
                    fecha_entrega=fecha_entrega if es_pedido else None,
                    numero_pedido=numero,
                    estado_produccion=(
                        Produccion.ESTADO_PRODUCCION_POR_CONFIRMAR if es_pedido else Produccion.ESTADO_PRODUCCION_PENDIENTE
                    ),
                    estado_pedido=Produccion.ESTADO_PEDIDO_ABIERTO if es_pedido else None,
                    creado_por=usuario if getattr(usuario, "is_authenticated", False) else None,
                )
                DetalleProduccion.objects.bulk_create(
                    [
                        DetalleProduccion(
                            produccion=produccion,
                            producto_id=linea.producto_id,
                            cantidad=linea.cantidad,
                            sede=linea.sede,
                        )
                        for linea in lineas
                    ]
                )
            return produccion
        except IntegrityError:
            folio_tomado = numero is not None and Produccion.objects.filter(numero_pedido=numero).exists()
            if not folio_tomado or intento == intentos:
                raise
            logger.warning("Número de pedido %s ya existe; reintento %s/%s", numero, intento, intentos)

    raise IntegrityError("No fue posible generar un número de pedido único.")


def actualizar_encabezado(produccion: Produccion, datos: dict[str, Any]) -> dict[str, Any]:
    """Aplica cambios de encabezado y regresa {campo: [antes, después]} de lo que cambió."""
    if not produccion.es_pedido:
        if datos.get("fecha_entrega") is not None:
            raise ProduccionInvalida("La fecha de entrega solo aplica a producciones tipo pedido.")
        if datos.get("estado_pedido") is not None:
            raise ProduccionInvalida("El estado de pedido solo aplica a producciones tipo pedido.")

    if "nombre" in datos:
        datos = {**datos, "nombre": (datos["nombre"] or "").strip()}
        if not datos["nombre"]:
            raise ProduccionInvalida("El nombre de la producción no puede quedar vacío.")

    cambios: dict[str, Any] = {}
    for campo in ("nombre", "fecha_entrega", "estado_produccion", "estado_pedido"):
        if campo not in datos:
            continue
        antes = getattr(produccion, campo)
        despues = datos[campo]
        if antes != despues:
            setattr(produccion, campo, despues)
            cambios[campo] = [str(antes) if antes is not None else None, str(despues) if despues is not None else None]

    if cambios:
        produccion.save(update_fields=[*cambios.keys(), "actualizado_en"])
    return cambios
