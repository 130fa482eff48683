"""Decimal helpers shared by the pure calculation modules"""

import decimal
from decimal import Decimal, ROUND_HALF_UP
from functools import wraps
from typing import Any, Callable, Iterable, TypeVar

ZERO = Decimal("0")
WHOLE_UNIT = Decimal("1")

F = TypeVar("F", bound=Callable[..., Any])


def quiet_decimal(func: F) -> F:
    """
    Evaluate ``func`` with the InvalidOperation and DivisionByZero traps cleared.

    Malformed amounts (NaN, zero installment counts) then propagate as NaN or
    Infinity instead of raising, and ordering comparisons against NaN are False.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        with decimal.localcontext() as ctx:
            ctx.traps[decimal.InvalidOperation] = False
            ctx.traps[decimal.DivisionByZero] = False
            return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def to_decimal(value: Any) -> Decimal:
    """Coerce ints, floats and numeric strings to Decimal (floats via their repr)"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def total(amounts: Iterable[Decimal]) -> Decimal:
    """Sum that stays Decimal for empty input"""
    return sum(amounts, ZERO)


def round_half_up(amount: Decimal) -> Decimal:
    """Round to a whole currency unit, halves away from zero"""
    if not amount.is_finite():
        return amount
    return amount.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)


def clamp_non_negative(amount: Decimal) -> Decimal:
    """max(0, amount), leaving NaN untouched so it stays visible downstream"""
    if amount.is_nan():
        return amount
    return amount if amount > ZERO else ZERO
