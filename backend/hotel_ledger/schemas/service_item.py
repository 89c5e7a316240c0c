"""Pydantic schemas for catalog services."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from hotel_ledger.schemas.money import MoneyStr


class ServiceItemCreate(BaseModel):
    name: str
    price: Decimal


class ServiceItemUpdate(BaseModel):
    name: str | None = None
    price: Decimal | None = None


class ServiceItemRead(BaseModel):
    id: uuid.UUID
    name: str
    price: MoneyStr
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ServiceItemUsage(BaseModel):
    """Usage accounting for one catalog service."""

    service_item_id: uuid.UUID
    usage_count: int
    total_revenue: MoneyStr
