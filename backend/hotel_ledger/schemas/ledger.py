"""Financial snapshot of a reservation."""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict

from hotel_ledger.models.payment import PaymentStatus
from hotel_ledger.schemas.money import MoneyStr


class LedgerSummaryRead(BaseModel):
    reservation_id: uuid.UUID
    base_amount: MoneyStr
    services_total: MoneyStr
    total: MoneyStr
    amount_paid: MoneyStr
    amount_remaining: MoneyStr
    payment_status: PaymentStatus
    service_count: int
    payment_count: int

    model_config = ConfigDict(from_attributes=True)
