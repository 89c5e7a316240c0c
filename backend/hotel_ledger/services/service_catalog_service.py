"""Operations for the service catalog."""
from __future__ import annotations

import logging
import re
import uuid
from decimal import Decimal
from typing import Final

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.errors import DuplicateName, InUse, InvalidName, NotFound
from hotel_ledger.core.money import SERVICE_PRICE_BOUNDS, Money, check_bounds, money_sum
from hotel_ledger.models.reservation import ReservationServiceLine
from hotel_ledger.models.service_item import ServiceItem
from hotel_ledger.security.sanitize import clean_name

logger = logging.getLogger(__name__)

_NAME_PATTERN: Final = re.compile(r"^[A-Za-zÀ-ÿ0-9\s\-'.]+$")
_NAME_MIN: Final = 2
_NAME_MAX: Final = 80
# Placeholder/markup words that never belong in a guest-facing service name.
_DISALLOWED_TERMS: Final = (
    "admin",
    "test",
    "debug",
    "null",
    "undefined",
    "script",
    "alert",
)


def normalize_service_name(raw: str) -> str:
    """Sanitize and validate a service name, returning the cleaned value."""
    if not isinstance(raw, str):
        raise InvalidName("Service name is required")
    name = clean_name(raw)
    if not _NAME_MIN <= len(name) <= _NAME_MAX:
        raise InvalidName(
            f"Service name must be between {_NAME_MIN} and {_NAME_MAX} characters",
            name=name,
        )
    if not _NAME_PATTERN.match(name):
        raise InvalidName(
            "Service name may only contain letters, digits, spaces, hyphens, "
            "apostrophes and periods",
            name=name,
        )
    lowered = name.casefold()
    for term in _DISALLOWED_TERMS:
        if term in lowered:
            raise InvalidName("Service name contains a disallowed term", name=name)
    return name


def _name_key(name: str) -> str:
    return name.casefold()


async def list_items(session: AsyncSession) -> list[ServiceItem]:
    result = await session.execute(select(ServiceItem).order_by(ServiceItem.name.asc()))
    return list(result.scalars().all())


async def get_item(session: AsyncSession, *, item_id: uuid.UUID) -> ServiceItem | None:
    return await session.get(ServiceItem, item_id)


async def require_item(session: AsyncSession, *, item_id: uuid.UUID) -> ServiceItem:
    item = await get_item(session, item_id=item_id)
    if item is None:
        raise NotFound("Service not found", service_item_id=str(item_id))
    return item


async def _find_by_key(
    session: AsyncSession, key: str, exclude_id: uuid.UUID | None = None
) -> ServiceItem | None:
    stmt = select(ServiceItem).where(ServiceItem.name_key == key)
    if exclude_id is not None:
        stmt = stmt.where(ServiceItem.id != exclude_id)
    return (await session.execute(stmt)).scalars().first()


async def _flush_or_duplicate(session: AsyncSession, name: str) -> None:
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateName("A service with this name already exists", name=name) from exc


async def create_item(
    session: AsyncSession,
    *,
    name: str,
    price: Money | Decimal | str,
) -> ServiceItem:
    """Validate and stage a new catalog item (the caller commits)."""
    clean = normalize_service_name(name)
    amount = check_bounds(price, SERVICE_PRICE_BOUNDS)
    existing = await _find_by_key(session, _name_key(clean))
    if existing is not None:
        logger.warning("Duplicate service name rejected: %s", clean)
        raise DuplicateName(
            "A service with this name already exists",
            name=clean,
            existing_id=str(existing.id),
        )
    item = ServiceItem(name=clean, name_key=_name_key(clean), price=amount)
    session.add(item)
    await _flush_or_duplicate(session, clean)
    return item


async def update_item(
    session: AsyncSession,
    *,
    item_id: uuid.UUID,
    name: str | None = None,
    price: Money | Decimal | str | None = None,
) -> tuple[ServiceItem, dict[str, dict[str, str]]]:
    """Rename and/or reprice an item; returns the item and the changed fields.

    Existing reservation lines keep the unit price frozen when they were
    attached.
    """
    item = await require_item(session, item_id=item_id)
    changes: dict[str, dict[str, str]] = {}
    if name is not None:
        clean = normalize_service_name(name)
        existing = await _find_by_key(session, _name_key(clean), exclude_id=item.id)
        if existing is not None:
            logger.warning("Rename of service %s to duplicate %s rejected", item.id, clean)
            raise DuplicateName(
                "A service with this name already exists",
                name=clean,
                existing_id=str(existing.id),
            )
        if clean != item.name:
            changes["name"] = {"old": item.name, "new": clean}
            item.name = clean
            item.name_key = _name_key(clean)
    if price is not None:
        amount = check_bounds(price, SERVICE_PRICE_BOUNDS)
        if amount != item.price:
            changes["price"] = {"old": str(item.price), "new": str(amount)}
            item.price = amount
    await _flush_or_duplicate(session, item.name)
    return item, changes


async def usage_count(session: AsyncSession, *, item_id: uuid.UUID) -> int:
    stmt = select(func.count()).select_from(ReservationServiceLine).where(
        ReservationServiceLine.service_item_id == item_id
    )
    return int((await session.execute(stmt)).scalar_one())


async def total_revenue(session: AsyncSession, *, item_id: uuid.UUID) -> Money:
    """Sum of frozen line subtotals for the item across all reservations."""
    result = await session.execute(
        select(ReservationServiceLine).where(
            ReservationServiceLine.service_item_id == item_id
        )
    )
    return money_sum(line.subtotal for line in result.scalars().all())


async def delete_item(session: AsyncSession, *, item_id: uuid.UUID) -> ServiceItem:
    """Stage deletion of an item that no reservation line references."""
    item = await require_item(session, item_id=item_id)
    count = await usage_count(session, item_id=item.id)
    if count > 0:
        logger.warning(
            "Deletion of service %s rejected: used by %s reservation lines",
            item.id,
            count,
        )
        raise InUse(
            "Service is used by reservations and cannot be deleted",
            service_item_id=str(item.id),
            usage_count=count,
        )
    await session.delete(item)
    await session.flush()
    return item
