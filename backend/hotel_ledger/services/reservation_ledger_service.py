"""Service lines attached to a reservation and the totals derived from them."""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.errors import AlreadyAttached, InvalidQuantity, NotFound
from hotel_ledger.core.money import Money, money_sum
from hotel_ledger.models.reservation import Reservation, ReservationServiceLine
from hotel_ledger.models.service_item import ServiceItem

logger = logging.getLogger(__name__)


def validate_quantity(quantity: int) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity("Quantity must be a whole number", quantity=repr(quantity))
    if quantity < 1:
        raise InvalidQuantity("Quantity must be at least 1", quantity=quantity)
    return quantity


async def lines(
    session: AsyncSession, *, reservation_id: uuid.UUID
) -> list[ReservationServiceLine]:
    result = await session.execute(
        select(ReservationServiceLine)
        .where(ReservationServiceLine.reservation_id == reservation_id)
        .order_by(ReservationServiceLine.added_at.asc())
    )
    return list(result.scalars().all())


async def services_total(session: AsyncSession, *, reservation_id: uuid.UUID) -> Money:
    return money_sum(
        line.subtotal for line in await lines(session, reservation_id=reservation_id)
    )


async def total(session: AsyncSession, *, reservation: Reservation) -> Money:
    """Base amount plus every line subtotal, recomputed from the store."""
    return reservation.base_amount + await services_total(
        session, reservation_id=reservation.id
    )


async def has_service(
    session: AsyncSession, *, reservation_id: uuid.UUID, service_item_id: uuid.UUID
) -> bool:
    return await _find_line_for_item(session, reservation_id, service_item_id) is not None


async def _find_line_for_item(
    session: AsyncSession, reservation_id: uuid.UUID, service_item_id: uuid.UUID
) -> ReservationServiceLine | None:
    result = await session.execute(
        select(ReservationServiceLine).where(
            ReservationServiceLine.reservation_id == reservation_id,
            ReservationServiceLine.service_item_id == service_item_id,
        )
    )
    return result.scalars().first()


async def require_line(
    session: AsyncSession, *, reservation: Reservation, line_id: uuid.UUID
) -> ReservationServiceLine:
    line = await session.get(ReservationServiceLine, line_id)
    if line is None or line.reservation_id != reservation.id:
        raise NotFound(
            "Service line not found on this reservation",
            reservation_id=str(reservation.id),
            line_id=str(line_id),
        )
    return line


async def attach_service(
    session: AsyncSession,
    *,
    reservation: Reservation,
    item: ServiceItem,
    quantity: int = 1,
) -> ReservationServiceLine:
    """Attach ``item`` at its current price; the unit price is frozen on the line."""
    validate_quantity(quantity)
    reservation_id, item_id = reservation.id, item.id
    existing = await _find_line_for_item(session, reservation_id, item_id)
    if existing is not None:
        logger.warning(
            "Service %s already attached to reservation %s", item_id, reservation_id
        )
        raise AlreadyAttached(
            "Service is already attached to this reservation",
            reservation_id=str(reservation_id),
            service_item_id=str(item_id),
            line_id=str(existing.id),
        )
    line = ReservationServiceLine(
        reservation_id=reservation_id,
        service_item_id=item_id,
        unit_price=item.price,
        quantity=quantity,
    )
    session.add(line)
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        raise AlreadyAttached(
            "Service is already attached to this reservation",
            reservation_id=str(reservation_id),
            service_item_id=str(item_id),
        ) from exc
    return line


async def detach_service(
    session: AsyncSession, *, reservation: Reservation, line_id: uuid.UUID
) -> ReservationServiceLine:
    line = await require_line(session, reservation=reservation, line_id=line_id)
    await session.delete(line)
    await session.flush()
    return line


async def update_quantity(
    session: AsyncSession,
    *,
    reservation: Reservation,
    line_id: uuid.UUID,
    quantity: int,
) -> tuple[ReservationServiceLine, int]:
    """Set a line's quantity; returns the line and its previous quantity."""
    validate_quantity(quantity)
    line = await require_line(session, reservation=reservation, line_id=line_id)
    previous = line.quantity
    line.quantity = quantity
    await session.flush()
    return line, previous


async def refresh_total_cache(session: AsyncSession, *, reservation: Reservation) -> Money:
    """Overwrite the denormalized ``total_amount`` with a fresh computation."""
    amount = await total(session, reservation=reservation)
    reservation.total_amount = amount
    await session.flush()
    return amount


__all__ = [
    "attach_service",
    "detach_service",
    "has_service",
    "lines",
    "refresh_total_cache",
    "require_line",
    "services_total",
    "total",
    "update_quantity",
    "validate_quantity",
]
