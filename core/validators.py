import re

TELEFONO_REGEX = re.compile(r"^3\d{9}$")

NOMBRE_SEDE_MIN, NOMBRE_SEDE_MAX = 2, 20
DIRECCION_SEDE_MIN, DIRECCION_SEDE_MAX = 5, 20


def limpiar_telefono(valor) -> str:
    return re.sub(r"\s", "", str(valor or ""))


def telefono_valido(valor) -> bool:
    """Celular colombiano: 10 dígitos empezando en 3, ignorando espacios."""
    return bool(TELEFONO_REGEX.fullmatch(limpiar_telefono(valor)))


def longitud_valida(valor, minimo: int, maximo: int) -> bool:
    return minimo <= len((valor or "").strip()) <= maximo
