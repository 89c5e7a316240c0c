"""Common API dependencies."""

from __future__ import annotations

import uuid
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.clock import Clock, SystemClock
from hotel_ledger.core.config import get_settings
from hotel_ledger.core.security import decode_access_token
from hotel_ledger.db.session import get_session
from hotel_ledger.models.user import User
from hotel_ledger.security.permissions import Action, ensure_can
from hotel_ledger.services import user_service
from hotel_ledger.services.reconciliation_service import ReconciliationFacade

settings = get_settings()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_v1_prefix}/auth/token")


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


def get_clock() -> Clock:
    return SystemClock()


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> User:
    """Authenticate request via bearer token."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        raise credentials_exception from exc

    subject = payload.get("sub")
    if subject is None:
        raise credentials_exception

    try:
        user_id = uuid.UUID(subject)
    except (ValueError, TypeError) as exc:
        raise credentials_exception from exc

    user = await user_service.get_user(session, user_id)
    if user is None or not user.is_active:
        raise credentials_exception
    return user


async def get_facade(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    clock: Annotated[Clock, Depends(get_clock)],
) -> ReconciliationFacade:
    return ReconciliationFacade(session, clock=clock)


def require(action: Action):
    """Dependency factory rejecting users that may not perform ``action``."""

    async def _checker(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        ensure_can(current_user, action)
        return current_user

    return _checker


CurrentUser = Annotated[User, Depends(get_current_user)]
SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
FacadeDep = Annotated[ReconciliationFacade, Depends(get_facade)]
