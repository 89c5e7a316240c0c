"""Staff user management endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from hotel_ledger.api import deps
from hotel_ledger.models.user import User
from hotel_ledger.schemas.user import UserCreate, UserRead, UserUpdate
from hotel_ledger.security.permissions import Action
from hotel_ledger.services import user_service

router = APIRouter()


@router.get("/me", response_model=UserRead, summary="Current user profile")
async def read_current_user(current_user: deps.CurrentUser) -> UserRead:
    """Return the authenticated user's profile."""
    return UserRead.model_validate(current_user)


@router.get("", response_model=list[UserRead], summary="List users")
async def list_users(
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.USER_MANAGE))],
    skip: int = 0,
    limit: int = 50,
) -> list[UserRead]:
    users = await user_service.list_users(session, skip=skip, limit=min(limit, 100))
    return [UserRead.model_validate(obj) for obj in users]


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    payload: UserCreate,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.USER_MANAGE))],
) -> UserRead:
    user = await user_service.create_user(session, **payload.model_dump())
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead, summary="Get user by ID")
async def read_user(
    user_id: uuid.UUID,
    session: deps.SessionDep,
    _: Annotated[User, Depends(deps.require(Action.USER_MANAGE))],
) -> UserRead:
    user = await user_service.require_user(session, user_id=user_id)
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead, summary="Update user")
async def update_user(
    user_id: uuid.UUID,
    payload: UserUpdate,
    session: deps.SessionDep,
    current_user: Annotated[User, Depends(deps.require(Action.USER_MANAGE))],
) -> UserRead:
    user = await user_service.require_user(session, user_id=user_id)
    updated, _ = await user_service.update_user(
        session,
        actor=current_user,
        user=user,
        **payload.model_dump(exclude_unset=True),
    )
    return UserRead.model_validate(updated)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete user",
)
async def delete_user(
    user_id: uuid.UUID,
    facade: deps.FacadeDep,
    current_user: deps.CurrentUser,
) -> Response:
    await facade.delete_user(current_user, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
