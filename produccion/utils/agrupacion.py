"""
Agrupa los detalles planos de una producción en un resumen por producto.

Los detalles llegan uno por (producto, sede); el frontend necesita un
renglón por producto con el total, el reparto por sede y la receta con sus
insumos. Todo aquí trabaja sobre dataclasses; solo `linea_desde_detalle`
conoce los modelos.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable


INSUMO_SIN_NOMBRE = "Sin nombre"
UNIDAD_DEFAULT = "unidad"


def _to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


@dataclass(frozen=True)
class InsumoRecetaDTO:
    id: int | None
    nombre: str
    cantidad: Decimal
    unidad: str


@dataclass(frozen=True)
class RecetaDTO:
    id: int
    nombre: str
    especificaciones: str = ""
    insumos: tuple[InsumoRecetaDTO, ...] = ()


@dataclass(frozen=True)
class LineaProduccionDTO:
    producto_id: int
    producto_nombre: str
    cantidad: Decimal | None
    sede: str | None = None
    producto_imagen: str | None = None
    receta: RecetaDTO | None = None


@dataclass
class ProductoResumen:
    id: int
    nombre: str
    imagen: str | None
    receta: RecetaDTO | None
    cantidad_total: Decimal = Decimal("0")
    cantidades_por_sede: dict[str, Decimal] = field(default_factory=dict)

    @property
    def insumos(self) -> tuple[InsumoRecetaDTO, ...]:
        return self.receta.insumos if self.receta else ()


def agrupar_por_producto(lineas: Iterable[LineaProduccionDTO]) -> list[ProductoResumen]:
    """
    Una pasada sobre las líneas, en orden de primera aparición del producto.

    Las líneas sin sede suman al total pero a ningún bucket, así que el total
    puede ser mayor que la suma de `cantidades_por_sede`.
    """
    por_producto: dict[int, ProductoResumen] = {}
    for linea in lineas:
        resumen = por_producto.get(linea.producto_id)
        if resumen is None:
            resumen = ProductoResumen(
                id=linea.producto_id,
                nombre=linea.producto_nombre,
                imagen=linea.producto_imagen or None,
                receta=linea.receta,
            )
            por_producto[linea.producto_id] = resumen

        cantidad = _to_decimal(linea.cantidad)
        resumen.cantidad_total += cantidad
        if linea.sede:
            resumen.cantidades_por_sede[linea.sede] = (
                resumen.cantidades_por_sede.get(linea.sede, Decimal("0")) + cantidad
            )
    return list(por_producto.values())


def receta_desde_modelo(receta) -> RecetaDTO | None:
    if receta is None:
        return None
    insumos = []
    for linea in receta.lineas.all():
        insumo = linea.insumo
        unidad = linea.unidad
        insumos.append(
            InsumoRecetaDTO(
                id=linea.insumo_id,
                nombre=(insumo.nombre if insumo else "") or INSUMO_SIN_NOMBRE,
                cantidad=_to_decimal(linea.cantidad),
                unidad=(unidad.codigo if unidad else "") or UNIDAD_DEFAULT,
            )
        )
    return RecetaDTO(
        id=receta.id,
        nombre=receta.nombre,
        especificaciones=receta.especificaciones or "",
        insumos=tuple(insumos),
    )


def linea_desde_detalle(detalle, recetas_cache: dict[int, RecetaDTO | None] | None = None) -> LineaProduccionDTO:
    producto = detalle.producto
    cache = recetas_cache if recetas_cache is not None else {}
    if producto.id not in cache:
        cache[producto.id] = receta_desde_modelo(producto.receta)
    return LineaProduccionDTO(
        producto_id=producto.id,
        producto_nombre=producto.nombre,
        producto_imagen=producto.imagen_url or None,
        cantidad=detalle.cantidad,
        sede=detalle.sede.nombre if detalle.sede_id else None,
        receta=cache[producto.id],
    )


def resumir_detalles(detalles: Iterable) -> list[ProductoResumen]:
    cache: dict[int, RecetaDTO | None] = {}
    return agrupar_por_producto(linea_desde_detalle(detalle, cache) for detalle in detalles)
