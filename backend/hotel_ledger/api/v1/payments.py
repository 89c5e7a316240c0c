"""Payment ledger API."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Response, status

from hotel_ledger.api import deps
from hotel_ledger.schemas.payment import PaymentCreate, PaymentRead, PaymentUpdate

router = APIRouter(prefix="/payments")


@router.post(
    "",
    response_model=PaymentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment or refund",
)
async def record_payment(
    payload: PaymentCreate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> PaymentRead:
    payment = await facade.record_payment(current_user, **payload.model_dump())
    return PaymentRead.model_validate(payment)


@router.patch("/{payment_id}", response_model=PaymentRead, summary="Edit a payment")
async def update_payment(
    payment_id: uuid.UUID,
    payload: PaymentUpdate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> PaymentRead:
    payment = await facade.update_payment(
        current_user, payment_id=payment_id, **payload.model_dump(exclude_unset=True)
    )
    return PaymentRead.model_validate(payment)


@router.delete(
    "/{payment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a payment",
)
async def delete_payment(
    payment_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> Response:
    await facade.delete_payment(current_user, payment_id=payment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
