"""
Currency helpers.

Ledger amounts are Decimal end to end: parsed from JSON/query strings,
stored in NUMERIC(12, 2) columns, summed and compared as Decimal, and
serialized as two-place strings ("60.00"). Floats never enter the math.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

from .errors import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any, field: str = "amount") -> Decimal:
    """
    Coerce a JSON/query value to a finite Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Booleans are rejected even though bool is an int subclass.
    Values finer than a cent are rejected rather than rounded, so what the
    client sent is what gets stored and checked against limits.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"{field} must be a number")
    else:
        raise ValidationError(f"{field} must be a number")

    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if result.normalize().as_tuple().exponent < CENT.as_tuple().exponent:
        raise ValidationError(f"{field} cannot have more than 2 decimal places")
    return result


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return str(quantize(Decimal(value)))
