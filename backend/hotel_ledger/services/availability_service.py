"""Room occupancy checks over half-open ``[start, end)`` date ranges."""
from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.errors import InvalidDateRange, NotFound
from hotel_ledger.models.reservation import Reservation, ReservationStatus
from hotel_ledger.models.room import Room


def _overlapping(room_id: uuid.UUID, start: date, end: date):
    return select(Reservation).where(
        Reservation.room_id == room_id,
        Reservation.status != ReservationStatus.CANCELLED,
        Reservation.start_date < end,
        Reservation.end_date > start,
    )


async def lock_room(session: AsyncSession, *, room_id: uuid.UUID) -> None:
    """Bump the room's lock counter so concurrent bookings serialize.

    Must run in the same transaction as the occupancy check and the insert.
    """
    result = await session.execute(
        update(Room)
        .where(Room.id == room_id)
        .values(lock_version=Room.lock_version + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFound("Room not found", room_id=str(room_id))


async def find_conflict(
    session: AsyncSession,
    *,
    room_id: uuid.UUID,
    start: date,
    end: date,
    exclude_reservation_id: uuid.UUID | None = None,
) -> Reservation | None:
    """Return the earliest non-cancelled reservation overlapping the range."""
    if end <= start:
        raise InvalidDateRange(
            "End date must be after start date",
            start=start.isoformat(),
            end=end.isoformat(),
        )
    stmt = _overlapping(room_id, start, end)
    if exclude_reservation_id is not None:
        stmt = stmt.where(Reservation.id != exclude_reservation_id)
    stmt = stmt.order_by(Reservation.start_date.asc()).limit(1)
    return (await session.execute(stmt)).scalars().first()


async def is_occupied(
    session: AsyncSession,
    *,
    room_id: uuid.UUID,
    start: date,
    end: date,
    exclude_reservation_id: uuid.UUID | None = None,
) -> bool:
    conflict = await find_conflict(
        session,
        room_id=room_id,
        start=start,
        end=end,
        exclude_reservation_id=exclude_reservation_id,
    )
    return conflict is not None


async def room_calendar(
    session: AsyncSession,
    *,
    room_id: uuid.UUID,
    start: date,
    end: date,
) -> list[Reservation]:
    """Non-cancelled reservations overlapping the window, ordered by start."""
    if end <= start:
        raise InvalidDateRange(
            "End date must be after start date",
            start=start.isoformat(),
            end=end.isoformat(),
        )
    stmt = _overlapping(room_id, start, end).order_by(Reservation.start_date.asc())
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())


__all__ = ["find_conflict", "is_occupied", "lock_room", "room_calendar"]
