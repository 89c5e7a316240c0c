"""Customer model."""
from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hotel_ledger.db.base import Base
from hotel_ledger.models.mixins import TimestampMixin


class Customer(TimestampMixin, Base):
    """Hotel guest billed for reservations."""

    __tablename__ = "customers"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    billing_address: Mapped[str | None] = mapped_column(String(255))
