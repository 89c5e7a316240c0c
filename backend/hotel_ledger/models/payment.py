"""Payment ledger entries."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hotel_ledger.core.money import Money
from hotel_ledger.db.base import Base
from hotel_ledger.models.mixins import TimestampMixin
from hotel_ledger.models.types import MoneyType

if TYPE_CHECKING:
    from hotel_ledger.models.reservation import Reservation


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    CHECK = "check"
    TRANSFER = "transfer"
    PAYPAL = "paypal"
    ONLINE = "online"


class PaymentType(str, enum.Enum):
    """Ledger entry kinds; only REFUND is subtracted from the amount paid."""

    DEPOSIT = "deposit"
    BALANCE = "balance"
    REFUND = "refund"
    FEE = "fee"


class PaymentStatus(str, enum.Enum):
    """Derived settlement state of a reservation."""

    UNPAID = "impaye"
    PARTIAL = "partiel"
    COMPLETE = "complet"


class Payment(TimestampMixin, Base):
    """Money received from (or refunded to) a customer for a reservation."""

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="amount_positive"),
        Index("ix_payments_reservation_id", "reservation_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    reservation_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("reservations.id", ondelete="RESTRICT"), nullable=False
    )
    amount: Mapped[Money] = mapped_column(MoneyType(), nullable=False)
    method: Mapped[PaymentMethod] = mapped_column(Enum(PaymentMethod), nullable=False)
    payment_type: Mapped[PaymentType] = mapped_column(
        Enum(PaymentType), default=PaymentType.BALANCE, nullable=False
    )
    paid_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    transaction_ref: Mapped[str | None] = mapped_column(String(100))
    comment: Mapped[str | None] = mapped_column(String(500))
    recorded_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )

    reservation: Mapped["Reservation"] = relationship(
        "Reservation", back_populates="payments"
    )

    @property
    def signed_amount(self) -> Money:
        if self.payment_type == PaymentType.REFUND:
            return Money(-self.amount.cents)
        return self.amount
