"""Fixed-point money held as integer cents."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Final

from hotel_ledger.core.errors import InvalidAmount

_MONEY_PLACES: Final = Decimal("0.01")
_CENTS_PER_UNIT: Final = 100


@dataclass(frozen=True, slots=True, order=True)
class Money:
    """Non-float amount in minor units (cents).

    Arithmetic never leaves integer cents. Rounding happens only when a value
    enters from a decimal, float or string, and always rounds half away from
    zero at two decimals.
    """

    cents: int

    def __post_init__(self) -> None:
        if isinstance(self.cents, bool) or not isinstance(self.cents, int):
            raise TypeError("Money cents must be an int")

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @classmethod
    def from_cents(cls, cents: int) -> Money:
        return cls(int(cents))

    @classmethod
    def from_decimal(cls, value: Decimal | int | float | str) -> Money:
        """Convert an external numeric value, rounding half away from zero."""
        if isinstance(value, Money):
            return value
        if isinstance(value, bool):
            raise InvalidAmount("Amount must be numeric", value=value)
        if isinstance(value, float):
            # repr keeps the literal the caller typed (2.675 stays 2.675)
            value = repr(value)
        try:
            number = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise InvalidAmount("Amount is not a valid decimal", value=str(value)) from exc
        if not number.is_finite():
            raise InvalidAmount("Amount must be finite", value=str(value))
        try:
            quantized = number.quantize(_MONEY_PLACES, rounding=ROUND_HALF_UP)
        except InvalidOperation as exc:
            raise InvalidAmount("Amount is out of range", value=str(value)) from exc
        return cls(int(quantized * _CENTS_PER_UNIT))

    @classmethod
    def from_decimal_string(cls, raw: str) -> Money:
        if not isinstance(raw, str) or not raw.strip():
            raise InvalidAmount("Amount is required", value=raw)
        return cls.from_decimal(raw)

    def to_decimal(self) -> Decimal:
        return (Decimal(self.cents) / _CENTS_PER_UNIT).quantize(_MONEY_PLACES)

    def to_decimal_string(self) -> str:
        return f"{self.to_decimal():.2f}"

    def __str__(self) -> str:
        return self.to_decimal_string()

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents + other.cents)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return Money(self.cents - other.cents)

    def subtract_clamped(self, other: Money) -> Money:
        """Subtract, flooring the result at zero."""
        return Money(max(0, self.cents - other.cents))

    def multiply(self, quantity: int) -> Money:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise TypeError("Quantity must be an int")
        return Money(self.cents * quantity)

    def is_zero(self) -> bool:
        return self.cents == 0

    def is_negative(self) -> bool:
        return self.cents < 0

    def compare(self, other: Money) -> int:
        return (self.cents > other.cents) - (self.cents < other.cents)


def money_sum(amounts) -> Money:
    total = 0
    for amount in amounts:
        total += amount.cents
    return Money(total)


@dataclass(frozen=True, slots=True)
class MoneyBounds:
    """Inclusive range an amount must fall in for a given use."""

    label: str
    minimum: Money
    maximum: Money

    def check(self, amount: Money) -> Money:
        if amount < self.minimum or amount > self.maximum:
            raise InvalidAmount(
                f"The {self.label} must be between {self.minimum} and {self.maximum}",
                amount=str(amount),
                minimum=str(self.minimum),
                maximum=str(self.maximum),
            )
        return amount


PAYMENT_BOUNDS: Final = MoneyBounds("payment amount", Money(1), Money(99_999_999))
RESERVATION_BASE_BOUNDS: Final = MoneyBounds(
    "reservation base amount", Money(1), Money(9_999_999_999)
)
SERVICE_PRICE_BOUNDS: Final = MoneyBounds(
    "service price", Money(1), Money(9_999_999_999)
)
ROOM_PRICE_BOUNDS: Final = MoneyBounds("room price", Money(1), Money(99_999_999))


def check_bounds(value: Money | Decimal | int | float | str, bounds: MoneyBounds) -> Money:
    """Convert ``value`` to Money and reject it when outside ``bounds``."""
    return bounds.check(Money.from_decimal(value))


__all__ = [
    "Money",
    "MoneyBounds",
    "PAYMENT_BOUNDS",
    "RESERVATION_BASE_BOUNDS",
    "ROOM_PRICE_BOUNDS",
    "SERVICE_PRICE_BOUNDS",
    "check_bounds",
    "money_sum",
]
