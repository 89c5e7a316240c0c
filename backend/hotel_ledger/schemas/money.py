"""Money representation at the API boundary."""
from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator

from hotel_ledger.core.money import Money


def _as_decimal_string(value: Any) -> str:
    if isinstance(value, Money):
        return value.to_decimal_string()
    return Money.from_decimal(value).to_decimal_string()


# Serialized as a two-decimal string ("151.00"); never a JSON float.
MoneyStr = Annotated[str, BeforeValidator(_as_decimal_string)]
