# app/utils/__init__.py
# ------------------------------------------------------------
# Exposição simplificada de utilitários
# ------------------------------------------------------------

from .number_helpers import to_decimal, to_float, to_int

__all__ = [
    "to_decimal",
    "to_float",
    "to_int",
]
