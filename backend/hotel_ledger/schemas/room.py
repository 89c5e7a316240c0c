"""Pydantic schemas for rooms."""
from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from hotel_ledger.models.reservation import ReservationStatus
from hotel_ledger.models.room import RoomState, RoomType
from hotel_ledger.schemas.money import MoneyStr


class RoomCreate(BaseModel):
    number: str = Field(min_length=1, max_length=10)
    room_type: RoomType
    capacity: int
    price: Decimal
    state: RoomState = RoomState.AVAILABLE
    description: str | None = None


class RoomUpdate(BaseModel):
    number: str | None = Field(default=None, min_length=1, max_length=10)
    room_type: RoomType | None = None
    capacity: int | None = None
    price: Decimal | None = None
    state: RoomState | None = None
    description: str | None = None


class RoomRead(BaseModel):
    id: uuid.UUID
    number: str
    room_type: RoomType
    state: RoomState
    capacity: int
    price: MoneyStr
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomCalendarEntry(BaseModel):
    """A booked range on a room calendar."""

    reservation_id: uuid.UUID = Field(validation_alias="id")
    start_date: date
    end_date: date
    status: ReservationStatus

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
