import re

from unidecode import unidecode

_ESPACIOS = re.compile(r"\s+")


def normalizar_nombre(texto) -> str:
    """Minúsculas, sin acentos y con espacios colapsados ("  Sede  Norte " -> "sede norte")."""
    if texto is None:
        return ""
    return _ESPACIOS.sub(" ", unidecode(str(texto))).strip().lower()
