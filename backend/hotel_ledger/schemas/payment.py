"""Pydantic schemas for payments."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hotel_ledger.models.payment import PaymentMethod, PaymentType
from hotel_ledger.schemas.money import MoneyStr


class PaymentCreate(BaseModel):
    """Payload for recording a payment; ``paid_at`` defaults to now."""

    reservation_id: uuid.UUID
    amount: Decimal
    method: PaymentMethod
    payment_type: PaymentType = PaymentType.BALANCE
    paid_at: datetime | None = None
    transaction_ref: str | None = Field(default=None, max_length=100)
    comment: str | None = None


class PaymentUpdate(BaseModel):
    amount: Decimal | None = None
    method: PaymentMethod | None = None
    payment_type: PaymentType | None = None
    paid_at: datetime | None = None
    transaction_ref: str | None = Field(default=None, max_length=100)
    comment: str | None = None


class PaymentRead(BaseModel):
    id: uuid.UUID
    reservation_id: uuid.UUID
    amount: MoneyStr
    method: PaymentMethod
    payment_type: PaymentType
    paid_at: datetime
    transaction_ref: str | None = None
    comment: str | None = None
    recorded_by_id: uuid.UUID | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
