from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any

_CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: float | Decimal) -> float:
    """Round to cents, half away from zero, returning a float for the API models."""
    return float(to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def round_cents(value: float | Decimal) -> Decimal:
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)
