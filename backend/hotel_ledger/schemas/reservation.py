"""Pydantic schemas for reservations and their service lines."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hotel_ledger.models.reservation import ReservationStatus
from hotel_ledger.schemas.money import MoneyStr


class ReservationCreate(BaseModel):
    """Payload for creating reservations.

    ``base_amount`` defaults to the room's nightly price times the nights.
    """

    room_id: uuid.UUID
    customer_id: uuid.UUID
    start_date: date
    end_date: date
    base_amount: Decimal | None = None
    status: ReservationStatus = ReservationStatus.PENDING
    notes: str | None = None


class ReservationUpdate(BaseModel):
    """Mutable reservation fields."""

    room_id: uuid.UUID | None = None
    start_date: date | None = None
    end_date: date | None = None
    base_amount: Decimal | None = None
    status: ReservationStatus | None = None
    notes: str | None = None


class ReservationRead(BaseModel):
    id: uuid.UUID
    room_id: uuid.UUID
    customer_id: uuid.UUID
    created_by_id: uuid.UUID
    status: ReservationStatus
    start_date: date
    end_date: date
    base_amount: MoneyStr
    total_amount: MoneyStr
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServiceLineCreate(BaseModel):
    service_item_id: uuid.UUID
    quantity: int = Field(default=1)


class ServiceLineUpdate(BaseModel):
    quantity: int


class ServiceLineRead(BaseModel):
    id: uuid.UUID
    reservation_id: uuid.UUID
    service_item_id: uuid.UUID
    unit_price: MoneyStr
    quantity: int
    subtotal: MoneyStr
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)
