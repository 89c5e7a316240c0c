"""Room inventory helpers."""
from __future__ import annotations

import logging
import re
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.errors import DuplicateName, NotFound, ValidationError
from hotel_ledger.core.money import ROOM_PRICE_BOUNDS, Money, check_bounds
from hotel_ledger.models.room import Room, RoomState, RoomType
from hotel_ledger.security.sanitize import clean_text

logger = logging.getLogger(__name__)

_ROOM_NUMBER_PATTERN = re.compile(r"^[A-Z0-9]{1,10}$")
MIN_CAPACITY = 1
MAX_CAPACITY = 10
DESCRIPTION_MAX_LENGTH = 1000


def normalize_room_number(raw: str) -> str:
    number = (raw or "").strip().upper()
    if not _ROOM_NUMBER_PATTERN.match(number):
        raise ValidationError(
            "Room number must be 1 to 10 letters or digits", field="number", value=raw
        )
    return number


def validate_capacity(capacity: int) -> int:
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise ValidationError("Capacity must be a whole number", field="capacity")
    if not MIN_CAPACITY <= capacity <= MAX_CAPACITY:
        raise ValidationError(
            f"Capacity must be between {MIN_CAPACITY} and {MAX_CAPACITY}",
            field="capacity",
            value=capacity,
        )
    return capacity


async def list_rooms(
    session: AsyncSession, *, state: RoomState | None = None
) -> list[Room]:
    stmt = select(Room).order_by(Room.number.asc())
    if state is not None:
        stmt = stmt.where(Room.state == state)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_room(session: AsyncSession, *, room_id: uuid.UUID) -> Room | None:
    return await session.get(Room, room_id)


async def require_room(session: AsyncSession, *, room_id: uuid.UUID) -> Room:
    room = await get_room(session, room_id=room_id)
    if room is None:
        raise NotFound("Room not found", room_id=str(room_id))
    return room


async def _ensure_number_free(
    session: AsyncSession, number: str, exclude_id: uuid.UUID | None = None
) -> None:
    stmt = select(Room.id).where(Room.number == number)
    if exclude_id is not None:
        stmt = stmt.where(Room.id != exclude_id)
    existing = (await session.execute(stmt)).scalar_one_or_none()
    if existing is not None:
        logger.warning("Duplicate room number rejected: %s", number)
        raise DuplicateName(
            "A room with this number already exists",
            number=number,
            existing_id=str(existing),
        )


async def _commit(session: AsyncSession, room: Room) -> Room:
    number = room.number
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Duplicate room number rejected by the store: %s", number)
        raise DuplicateName("A room with this number already exists", number=number) from exc
    await session.refresh(room)
    return room


async def create_room(
    session: AsyncSession,
    *,
    number: str,
    room_type: RoomType,
    capacity: int,
    price: Money | Decimal | str,
    state: RoomState = RoomState.AVAILABLE,
    description: str | None = None,
) -> Room:
    clean_number = normalize_room_number(number)
    room = Room(
        number=clean_number,
        room_type=room_type,
        state=state,
        capacity=validate_capacity(capacity),
        price=check_bounds(price, ROOM_PRICE_BOUNDS),
        description=clean_text(description, DESCRIPTION_MAX_LENGTH),
    )
    await _ensure_number_free(session, clean_number)
    session.add(room)
    room = await _commit(session, room)
    logger.info("Room %s created (%s)", room.number, room.id)
    return room


async def update_room(
    session: AsyncSession,
    *,
    room: Room,
    number: str | None = None,
    room_type: RoomType | None = None,
    capacity: int | None = None,
    price: Money | Decimal | str | None = None,
    state: RoomState | None = None,
    description: str | None = None,
) -> Room:
    """Update mutable room fields; the price does not touch existing bookings."""
    if number is not None:
        clean_number = normalize_room_number(number)
        await _ensure_number_free(session, clean_number, exclude_id=room.id)
        room.number = clean_number
    if room_type is not None:
        room.room_type = room_type
    if capacity is not None:
        room.capacity = validate_capacity(capacity)
    if price is not None:
        room.price = check_bounds(price, ROOM_PRICE_BOUNDS)
    if state is not None:
        room.state = state
    if description is not None:
        room.description = clean_text(description, DESCRIPTION_MAX_LENGTH)
    return await _commit(session, room)
