"""Service catalog API."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from hotel_ledger.api import deps
from hotel_ledger.models.user import User
from hotel_ledger.schemas.service_item import (
    ServiceItemCreate,
    ServiceItemRead,
    ServiceItemUpdate,
    ServiceItemUsage,
)
from hotel_ledger.security.permissions import Action
from hotel_ledger.services import service_catalog_service

router = APIRouter()


@router.get("", response_model=list[ServiceItemRead], summary="List catalog services")
async def list_service_items(
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.CATALOG_READ))],
) -> list[ServiceItemRead]:
    items = await service_catalog_service.list_items(session)
    return [ServiceItemRead.model_validate(item) for item in items]


@router.post(
    "",
    response_model=ServiceItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create catalog service",
)
async def create_service_item(
    payload: ServiceItemCreate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> ServiceItemRead:
    item = await facade.create_service_item(
        current_user, name=payload.name, price=payload.price
    )
    return ServiceItemRead.model_validate(item)


@router.get("/{item_id}", response_model=ServiceItemRead, summary="Get catalog service")
async def get_service_item(
    item_id: uuid.UUID,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.CATALOG_READ))],
) -> ServiceItemRead:
    item = await service_catalog_service.require_item(session, item_id=item_id)
    return ServiceItemRead.model_validate(item)


@router.get(
    "/{item_id}/usage",
    response_model=ServiceItemUsage,
    summary="Usage count and revenue of a catalog service",
)
async def service_item_usage(
    item_id: uuid.UUID,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.CATALOG_READ))],
) -> ServiceItemUsage:
    item = await service_catalog_service.require_item(session, item_id=item_id)
    return ServiceItemUsage(
        service_item_id=item.id,
        usage_count=await service_catalog_service.usage_count(session, item_id=item.id),
        total_revenue=await service_catalog_service.total_revenue(session, item_id=item.id),
    )


@router.patch("/{item_id}", response_model=ServiceItemRead, summary="Update catalog service")
async def update_service_item(
    item_id: uuid.UUID,
    payload: ServiceItemUpdate,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> ServiceItemRead:
    item = await facade.update_service_item(
        current_user, item_id=item_id, name=payload.name, price=payload.price
    )
    return ServiceItemRead.model_validate(item)


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete catalog service",
)
async def delete_service_item(
    item_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> Response:
    await facade.delete_service_item(current_user, item_id=item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
