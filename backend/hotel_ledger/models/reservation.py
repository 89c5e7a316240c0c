"""Reservation and service line models."""
from __future__ import annotations

import enum
import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_ledger.core.money import Money
from hotel_ledger.db.base import Base
from hotel_ledger.models.mixins import LockCounterMixin, TimestampMixin
from hotel_ledger.models.types import MoneyType

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from hotel_ledger.models.customer import Customer
    from hotel_ledger.models.payment import Payment
    from hotel_ledger.models.room import Room
    from hotel_ledger.models.service_item import ServiceItem
    from hotel_ledger.models.user import User


class ReservationStatus(str, enum.Enum):
    """Lifecycle states for reservations."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Reservation(LockCounterMixin, TimestampMixin, Base):
    """A room booked for a customer over ``[start_date, end_date)``."""

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="date_range"),
        Index("ix_reservations_room_dates", "room_id", "start_date", "end_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    room_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False
    )
    customer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("customers.id", ondelete="RESTRICT"), nullable=False
    )
    created_by_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"), nullable=False
    )
    status: Mapped[ReservationStatus] = mapped_column(
        Enum(ReservationStatus), default=ReservationStatus.PENDING, nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    base_amount: Mapped[Money] = mapped_column(MoneyType(), nullable=False)
    # Denormalized for list queries; recomputed on every ledger mutation.
    total_amount: Mapped[Money] = mapped_column(MoneyType(), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(1024))

    room: Mapped["Room"] = relationship("Room", lazy="joined")
    customer: Mapped["Customer"] = relationship("Customer", lazy="joined")
    created_by: Mapped["User"] = relationship("User")
    service_lines: Mapped[list["ReservationServiceLine"]] = relationship(
        "ReservationServiceLine",
        back_populates="reservation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ReservationServiceLine.added_at",
    )
    payments: Mapped[list["Payment"]] = relationship(
        "Payment", back_populates="reservation", passive_deletes="all"
    )


class ReservationServiceLine(Base):
    """A catalog service attached to one reservation at a frozen unit price."""

    __tablename__ = "reservation_service_lines"
    __table_args__ = (
        UniqueConstraint(
            "reservation_id",
            "service_item_id",
            name="uq_reservation_service_lines_reservation_item",
        ),
        CheckConstraint("quantity >= 1", name="quantity_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    reservation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False
    )
    service_item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("service_items.id", ondelete="RESTRICT"), nullable=False
    )
    unit_price: Mapped[Money] = mapped_column(MoneyType(), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(UTC)
    )

    reservation: Mapped[Reservation] = relationship(
        Reservation, back_populates="service_lines"
    )
    service_item: Mapped["ServiceItem"] = relationship("ServiceItem", lazy="joined")

    @property
    def subtotal(self) -> Money:
        return self.unit_price.multiply(self.quantity)
