"""Fixed-point cents arithmetic

Every monetary value inside the engine is an integer number of cents.
Floats only appear at the presentation boundary and are converted through
Decimal so that binary rounding never leaks into a stored amount.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from finansix_ledger.domain.exceptions import ValidationError

Number = Union[int, float, Decimal, str]

_ONE = Decimal(1)
_HUNDRED = Decimal(100)


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except ArithmeticError as e:
        raise ValidationError(f"Not a numeric amount: {value!r}") from e


def _round(value: Decimal) -> int:
    if not value.is_finite():
        raise ValidationError(f"Not a finite amount: {value}")
    try:
        # ROUND_HALF_UP on Decimal rounds ties away from zero
        return int(value.quantize(_ONE, rounding=ROUND_HALF_UP))
    except ArithmeticError as e:
        raise ValidationError(f"Amount out of range: {value}") from e


def _require_cents(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Cents must be an integer, got {value!r}")
    return value


def to_cents(amount: Number) -> int:
    """
    Convert a currency amount to cents.

    Example:
        123.456 → 12346, 123.454 → 12345
    """
    return _round(_as_decimal(amount) * _HUNDRED)


def to_reais(cents: int) -> Decimal:
    """Convert cents back to a currency amount (exact)"""
    return Decimal(_require_cents(cents)) / _HUNDRED


def add_cents(*amounts: int) -> int:
    return sum((_require_cents(a) for a in amounts), 0)


def subtract_cents(a: int, b: int) -> int:
    return _require_cents(a) - _require_cents(b)


def multiply_cents(cents: int, factor: Number) -> int:
    """Scale a cents amount, rounding to the nearest cent"""
    return _round(Decimal(_require_cents(cents)) * _as_decimal(factor))


def divide_cents(cents: int, divisor: Number) -> int:
    """Split a cents amount, rounding to the nearest cent"""
    divisor_dec = _as_decimal(divisor)
    if divisor_dec == 0:
        raise ValidationError("Cannot divide an amount by zero")
    return _round(Decimal(_require_cents(cents)) / divisor_dec)
