"""Reservation ledger API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from hotel_ledger.api import deps
from hotel_ledger.models.reservation import ReservationStatus
from hotel_ledger.schemas.ledger import LedgerSummaryRead
from hotel_ledger.schemas.payment import PaymentRead
from hotel_ledger.schemas.reservation import (
    ReservationCreate,
    ReservationRead,
    ReservationUpdate,
    ServiceLineCreate,
    ServiceLineRead,
    ServiceLineUpdate,
)

router = APIRouter()


@router.get("", response_model=list[ReservationRead], summary="List reservations")
async def list_reservations(
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
    room_id: uuid.UUID | None = None,
    customer_id: uuid.UUID | None = None,
    status_filter: Annotated[ReservationStatus | None, Query(alias="status")] = None,
    skip: int = 0,
    limit: int = 50,
) -> list[ReservationRead]:
    reservations = await facade.list_reservations(
        current_user,
        room_id=room_id,
        customer_id=customer_id,
        status=status_filter,
        skip=skip,
        limit=min(limit, 100),
    )
    return [ReservationRead.model_validate(obj) for obj in reservations]


@router.post(
    "",
    response_model=ReservationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create reservation",
)
async def create_reservation(
    payload: ReservationCreate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> ReservationRead:
    reservation = await facade.create_reservation(current_user, **payload.model_dump())
    return ReservationRead.model_validate(reservation)


@router.get("/{reservation_id}", response_model=ReservationRead, summary="Get reservation")
async def get_reservation(
    reservation_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> ReservationRead:
    reservation = await facade.get_reservation(current_user, reservation_id=reservation_id)
    return ReservationRead.model_validate(reservation)


@router.patch(
    "/{reservation_id}", response_model=ReservationRead, summary="Update reservation"
)
async def update_reservation(
    reservation_id: uuid.UUID,
    payload: ReservationUpdate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> ReservationRead:
    reservation = await facade.update_reservation(
        current_user,
        reservation_id=reservation_id,
        **payload.model_dump(exclude_unset=True),
    )
    return ReservationRead.model_validate(reservation)


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete reservation",
)
async def delete_reservation(
    reservation_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> Response:
    await facade.delete_reservation(current_user, reservation_id=reservation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{reservation_id}/services",
    response_model=list[ServiceLineRead],
    summary="List attached services",
)
async def list_service_lines(
    reservation_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> list[ServiceLineRead]:
    lines = await facade.list_service_lines(current_user, reservation_id=reservation_id)
    return [ServiceLineRead.model_validate(line) for line in lines]


@router.post(
    "/{reservation_id}/services",
    response_model=ServiceLineRead,
    status_code=status.HTTP_201_CREATED,
    summary="Attach a catalog service",
)
async def attach_service(
    reservation_id: uuid.UUID,
    payload: ServiceLineCreate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> ServiceLineRead:
    line = await facade.attach_service(
        current_user,
        reservation_id=reservation_id,
        service_item_id=payload.service_item_id,
        quantity=payload.quantity,
    )
    return ServiceLineRead.model_validate(line)


@router.patch(
    "/{reservation_id}/services/{line_id}",
    response_model=ServiceLineRead,
    summary="Change the quantity of an attached service",
)
async def update_service_quantity(
    reservation_id: uuid.UUID,
    line_id: uuid.UUID,
    payload: ServiceLineUpdate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> ServiceLineRead:
    line = await facade.update_service_quantity(
        current_user,
        reservation_id=reservation_id,
        line_id=line_id,
        quantity=payload.quantity,
    )
    return ServiceLineRead.model_validate(line)


@router.delete(
    "/{reservation_id}/services/{line_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Detach a service",
)
async def detach_service(
    reservation_id: uuid.UUID,
    line_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> Response:
    await facade.detach_service(current_user, reservation_id=reservation_id, line_id=line_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{reservation_id}/payments",
    response_model=list[PaymentRead],
    summary="List payments of a reservation",
)
async def list_reservation_payments(
    reservation_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> list[PaymentRead]:
    payments = await facade.list_payments(current_user, reservation_id=reservation_id)
    return [PaymentRead.model_validate(payment) for payment in payments]


@router.get(
    "/{reservation_id}/ledger",
    response_model=LedgerSummaryRead,
    summary="Totals, amount paid and payment status",
)
async def reservation_ledger(
    reservation_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> LedgerSummaryRead:
    summary = await facade.reservation_summary(current_user, reservation_id=reservation_id)
    return LedgerSummaryRead.model_validate(summary)
