"""Catalog of add-on services a reservation can attach."""
from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hotel_ledger.core.money import Money
from hotel_ledger.db.base import Base
from hotel_ledger.models.mixins import TimestampMixin
from hotel_ledger.models.types import MoneyType


class ServiceItem(TimestampMixin, Base):
    """Named, priced add-on (breakfast, parking, spa...)."""

    __tablename__ = "service_items"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    # case-folded name; the unique index is the authoritative duplicate guard
    name_key: Mapped[str] = mapped_column(String(80), unique=True, nullable=False)
    price: Mapped[Money] = mapped_column(MoneyType(), nullable=False)
