"""
Money - Exact Decimal Monetary Value

This module contains the monetary value type used for every price and discount
amount. It wraps decimal.Decimal so that arithmetic never goes through binary
floating point.

Files that USE this module:
- cartprice.domain.models (prices, rule caps, result totals)
- cartprice.application.* (discount arithmetic)
- cartprice.adapters.formatting.formatter (presentation rounding)

Files that this module USES:
- cartprice.domain.errors (InvalidAmount)
"""
from __future__ import annotations

from decimal import (
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    Inexact,
    InvalidOperation,
    Overflow,
)
from functools import total_ordering
from typing import Iterable, Union

from cartprice.domain.errors import InvalidAmount

AmountLike = Union["Money", Decimal, int, str]

_HUNDRED = Decimal(100)

# Amount arithmetic runs here, never in the thread's default 28-digit context.
# A result that would need rounding raises instead.
_EXACT = Context(prec=1000, traps=[InvalidOperation, DivisionByZero, Overflow, Inexact])
_DISPLAY = Context(prec=1000)


def _exact(operation, left: Decimal, right: Decimal) -> Decimal:
    try:
        return operation(left, right)
    except Inexact:
        raise InvalidAmount(
            f"Result of {operation.__name__}({left}, {right}) cannot be represented exactly"
        ) from None


def to_decimal(value: AmountLike, name: str = "amount") -> Decimal:
    """
    Convert an int, str, Decimal or Money to a finite Decimal.

    Floats and bools are rejected: a float has already lost precision by the
    time it reaches us.

    Raises:
        InvalidAmount: If the value is not an exact finite number
    """
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmount(
            f"{name} must be an int, str or Decimal, got {type(value).__name__}: {value!r}"
        )
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip().replace(",", ""))
        except InvalidOperation:
            raise InvalidAmount(f"{name} is not a number: {value!r}") from None
    else:
        raise InvalidAmount(
            f"{name} must be an int, str or Decimal, got {type(value).__name__}: {value!r}"
        )
    if not result.is_finite():
        raise InvalidAmount(f"{name} must be finite, got {value!r}")
    return result


@total_ordering
class Money:
    """
    Immutable exact monetary amount.

    Supports +, -, * (by a number), / (by a number or Money), comparisons and
    equality against Money, int and Decimal. No rounding happens here:
    results are computed to 1000 significant digits, and a result that still
    cannot be held exactly (such as Money(10) / 3) raises InvalidAmount.
    quantize() exists for presentation code only.
    """

    __slots__ = ("_amount",)

    def __init__(self, amount: AmountLike = 0):
        object.__setattr__(self, "_amount", to_decimal(amount))

    def __setattr__(self, name, value):
        raise AttributeError("Money is immutable")

    @property
    def amount(self) -> Decimal:
        return self._amount

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def sum(cls, values: Iterable[Money]) -> Money:
        total = Decimal(0)
        for value in values:
            total = _exact(_EXACT.add, total, to_decimal(value))
        return cls(total)

    def percent(self, percentage: AmountLike) -> Money:
        """Return percentage% of this amount (amount × pct / 100), exactly."""
        scaled = _exact(_EXACT.multiply, self._amount, to_decimal(percentage, "percentage"))
        return Money(_exact(_EXACT.divide, scaled, _HUNDRED))

    def quantize(self, places: int = 2) -> Decimal:
        """Round for display using ROUND_HALF_UP."""
        return self._amount.quantize(
            Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=_DISPLAY
        )

    def is_zero(self) -> bool:
        return self._amount == 0

    def is_negative(self) -> bool:
        return self._amount < 0

    def __add__(self, other):
        if not isinstance(other, (Money, Decimal, int)) or isinstance(other, bool):
            return NotImplemented
        return Money(_exact(_EXACT.add, self._amount, to_decimal(other)))

    __radd__ = __add__

    def __sub__(self, other):
        if not isinstance(other, (Money, Decimal, int)) or isinstance(other, bool):
            return NotImplemented
        return Money(_exact(_EXACT.subtract, self._amount, to_decimal(other)))

    def __rsub__(self, other):
        if not isinstance(other, (Decimal, int)) or isinstance(other, bool):
            return NotImplemented
        return Money(_exact(_EXACT.subtract, to_decimal(other), self._amount))

    def __mul__(self, factor):
        # Money × Money has no meaning for a currency amount
        if isinstance(factor, Money) or not isinstance(factor, (Decimal, int, str)):
            return NotImplemented
        return Money(_exact(_EXACT.multiply, self._amount, to_decimal(factor, "factor")))

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        if isinstance(divisor, Money):
            if divisor.is_zero():
                raise InvalidAmount("Cannot divide by a zero amount")
            return self._amount / divisor.amount
        if not isinstance(divisor, (Decimal, int, str)) or isinstance(divisor, bool):
            return NotImplemented
        value = to_decimal(divisor, "divisor")
        if value == 0:
            raise InvalidAmount("Cannot divide by zero")
        return Money(_exact(_EXACT.divide, self._amount, value))

    def __neg__(self) -> Money:
        return Money(self._amount.copy_negate())

    def __eq__(self, other) -> bool:
        if isinstance(other, Money):
            return self._amount == other.amount
        if isinstance(other, (Decimal, int)) and not isinstance(other, bool):
            return self._amount == other
        return NotImplemented

    def __lt__(self, other) -> bool:
        if isinstance(other, Money):
            return self._amount < other.amount
        if isinstance(other, (Decimal, int)) and not isinstance(other, bool):
            return self._amount < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._amount)

    def __repr__(self) -> str:
        return f"Money('{self._amount}')"

    def __str__(self) -> str:
        return str(self._amount)
