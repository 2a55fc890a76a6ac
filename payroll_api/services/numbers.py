# payroll_api/services/numbers.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

ZERO = Decimal("0")
CENTS = Decimal("0.01")
SIXTY = Decimal("60")


def dec(x) -> Decimal:
    """Lenient Decimal coercion; None / "" / garbage => 0."""
    if x is None or x == "":
        return ZERO
    if isinstance(x, Decimal):
        return x
    try:
        return Decimal(str(x))
    except (InvalidOperation, ValueError):
        return ZERO


def money(x) -> Decimal:
    return dec(x).quantize(CENTS, rounding=ROUND_HALF_UP)


def qty(x) -> Decimal:
    """Minutes / hours / days are kept at two decimals, same as the columns."""
    return dec(x).quantize(CENTS, rounding=ROUND_HALF_UP)


def to_json_number(x) -> float:
    return float(money(x))
