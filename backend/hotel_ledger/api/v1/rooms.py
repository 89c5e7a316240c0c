"""Room inventory API."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from hotel_ledger.api import deps
from hotel_ledger.models.room import RoomState
from hotel_ledger.models.user import User
from hotel_ledger.schemas.room import RoomCalendarEntry, RoomCreate, RoomRead, RoomUpdate
from hotel_ledger.security.permissions import Action
from hotel_ledger.services import availability_service, room_service

router = APIRouter()


@router.get("", response_model=list[RoomRead], summary="List rooms")
async def list_rooms(
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.ROOM_READ))],
    state: RoomState | None = None,
) -> list[RoomRead]:
    rooms = await room_service.list_rooms(session, state=state)
    return [RoomRead.model_validate(room) for room in rooms]


@router.post(
    "",
    response_model=RoomRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create room",
)
async def create_room(
    payload: RoomCreate,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.ROOM_WRITE))],
) -> RoomRead:
    room = await room_service.create_room(session, **payload.model_dump())
    return RoomRead.model_validate(room)


@router.get("/{room_id}", response_model=RoomRead, summary="Get room")
async def get_room(
    room_id: uuid.UUID,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.ROOM_READ))],
) -> RoomRead:
    room = await room_service.require_room(session, room_id=room_id)
    return RoomRead.model_validate(room)


@router.patch("/{room_id}", response_model=RoomRead, summary="Update room")
async def update_room(
    room_id: uuid.UUID,
    payload: RoomUpdate,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.ROOM_WRITE))],
) -> RoomRead:
    room = await room_service.require_room(session, room_id=room_id)
    room = await room_service.update_room(
        session, room=room, **payload.model_dump(exclude_unset=True)
    )
    return RoomRead.model_validate(room)


@router.delete(
    "/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete room",
)
async def delete_room(
    room_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> Response:
    await facade.delete_room(current_user, room_id=room_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{room_id}/calendar",
    response_model=list[RoomCalendarEntry],
    summary="Reservations overlapping a window",
)
async def room_calendar(
    room_id: uuid.UUID,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.RESERVATION_READ))],
    start: Annotated[date, Query()],
    end: Annotated[date, Query()],
) -> list[RoomCalendarEntry]:
    await room_service.require_room(session, room_id=room_id)
    reservations = await availability_service.room_calendar(
        session, room_id=room_id, start=start, end=end
    )
    return [RoomCalendarEntry.model_validate(item) for item in reservations]
