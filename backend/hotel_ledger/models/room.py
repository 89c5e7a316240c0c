"""Room inventory model."""
from __future__ import annotations

import enum
import uuid

from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hotel_ledger.core.money import Money
from hotel_ledger.db.base import Base
from hotel_ledger.models.mixins import LockCounterMixin, TimestampMixin
from hotel_ledger.models.types import MoneyType


class RoomType(str, enum.Enum):
    STANDARD = "standard"
    COMFORT = "comfort"
    SUITE = "suite"
    FAMILY = "family"
    DELUXE = "deluxe"
    JUNIOR_SUITE = "junior_suite"
    PRESIDENTIAL_SUITE = "presidential_suite"


class RoomState(str, enum.Enum):
    """Housekeeping state; only OUT_OF_SERVICE blocks new bookings."""

    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"


class Room(LockCounterMixin, TimestampMixin, Base):
    """A bookable room."""

    __tablename__ = "rooms"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    number: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    room_type: Mapped[RoomType] = mapped_column(Enum(RoomType), nullable=False)
    state: Mapped[RoomState] = mapped_column(
        Enum(RoomState), default=RoomState.AVAILABLE, nullable=False
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[Money] = mapped_column(MoneyType(), nullable=False)
    description: Mapped[str | None] = mapped_column(String(1000))
