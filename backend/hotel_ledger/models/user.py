"""Staff user model."""
from __future__ import annotations

import enum
import uuid

from sqlalchemy import Boolean, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from hotel_ledger.db.base import Base
from hotel_ledger.models.mixins import TimestampMixin


class UserRole(str, enum.Enum):
    """Back-office roles."""

    ADMIN = "admin"
    RECEPTIONIST = "receptionist"


class User(TimestampMixin, Base):
    """Staff member who signs in to the back-office."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(180), unique=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    full_name: Mapped[str] = mapped_column(String(120), nullable=False)
    role: Mapped[UserRole] = mapped_column(Enum(UserRole), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
