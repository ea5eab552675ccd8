# app/utils/number_helpers.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENTAVOS = Decimal("0.01")


def to_int(value, default=None):
    """Converte string ou número para int; valores fracionários são rejeitados."""
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        return default
    try:
        numero = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        return default
    if numero != numero.to_integral_value():
        return default
    return int(numero)


def to_decimal(value, default=None):
    """Converte string ou número para Decimal (aceita vírgula decimal)."""
    if value is None or isinstance(value, bool) or str(value).strip() == "":
        return default
    try:
        numero = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        return default
    if not numero.is_finite():
        return default
    return numero


def arredondar_moeda(valor) -> Decimal:
    return Decimal(valor).quantize(CENTAVOS, rounding=ROUND_HALF_UP)


def to_float(value, default=0.0):
    """Converte Decimal/None vindo do banco para float serializável."""
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
