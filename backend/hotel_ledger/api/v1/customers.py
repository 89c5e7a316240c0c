"""Customer registry API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from hotel_ledger.api import deps
from hotel_ledger.models.user import User
from hotel_ledger.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from hotel_ledger.security.permissions import Action
from hotel_ledger.services import customer_service

router = APIRouter()


@router.get("", response_model=list[CustomerRead], summary="List customers")
async def list_customers(
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.CUSTOMER_READ))],
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> list[CustomerRead]:
    customers = await customer_service.list_customers(
        session, search=search, skip=skip, limit=min(limit, 100)
    )
    return [CustomerRead.model_validate(obj) for obj in customers]


@router.post(
    "",
    response_model=CustomerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create customer",
)
async def create_customer(
    payload: CustomerCreate,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.CUSTOMER_WRITE))],
) -> CustomerRead:
    customer = await customer_service.create_customer(session, **payload.model_dump())
    return CustomerRead.model_validate(customer)


@router.get("/{customer_id}", response_model=CustomerRead, summary="Get customer")
async def get_customer(
    customer_id: uuid.UUID,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.CUSTOMER_READ))],
) -> CustomerRead:
    customer = await customer_service.require_customer(session, customer_id=customer_id)
    return CustomerRead.model_validate(customer)


@router.patch("/{customer_id}", response_model=CustomerRead, summary="Update customer")
async def update_customer(
    customer_id: uuid.UUID,
    payload: CustomerUpdate,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.CUSTOMER_WRITE))],
) -> CustomerRead:
    customer = await customer_service.require_customer(session, customer_id=customer_id)
    customer = await customer_service.update_customer(
        session, customer=customer, **payload.model_dump(exclude_unset=True)
    )
    return CustomerRead.model_validate(customer)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete customer",
)
async def delete_customer(
    customer_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> Response:
    await facade.delete_customer(current_user, customer_id=customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
