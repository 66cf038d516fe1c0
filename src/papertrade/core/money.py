"""Decimal helpers for prices, cash amounts and share quantities."""

import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Union

CASH_QUANTUM = Decimal("0.0001")
PRICE_QUANTUM = Decimal("0.0001")
QUANTITY_PLACES = 8
# Share quantities are stored as NUMERIC(18, 8)
MAX_QUANTITY = Decimal(10) ** (18 - QUANTITY_PLACES)

ZERO = Decimal("0")


def quantize_cash(value: Decimal) -> Decimal:
    """Round a cash amount to 4 decimal places."""
    return value.quantize(CASH_QUANTUM, rounding=ROUND_HALF_EVEN)


def quantize_price(value: Decimal) -> Decimal:
    """Round a per-share price to 4 decimal places."""
    return value.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_EVEN)


def to_decimal(value: Union[Decimal, float, int, str]) -> Decimal:
    """
    Convert a numeric input to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. Raises ValueError for
    anything that is not a finite number.
    """
    if isinstance(value, bool):
        raise ValueError(f"not a number: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"not finite: {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, TypeError) as exc:
        raise ValueError(f"not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"not finite: {value!r}")
    return result


def decimal_places(value: Decimal) -> int:
    """Number of digits after the decimal point in ``value``."""
    exponent = value.normalize().as_tuple().exponent
    return -exponent if isinstance(exponent, int) and exponent < 0 else 0
