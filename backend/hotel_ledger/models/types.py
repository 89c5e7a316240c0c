"""Column types shared by the ledger models."""

from __future__ import annotations

from typing import Any

from sqlalchemy.types import BigInteger, TypeDecorator

from hotel_ledger.core.money import Money


class MoneyType(TypeDecorator):
    """Stores :class:`Money` as an integer number of cents."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: Any, dialect):
        if value is None:
            return None
        if not isinstance(value, Money):
            value = Money.from_decimal(value)
        return value.cents

    def process_result_value(self, value: Any, dialect):
        if value is None:
            return None
        return Money(int(value))
