"""Authentication service helpers."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.security import create_access_token, verify_password
from hotel_ledger.models.user import User
from hotel_ledger.services import user_service

logger = logging.getLogger(__name__)


async def authenticate_user(
    session: AsyncSession, email: str, password: str
) -> User | None:
    """Validate credentials and return a user if correct."""
    user = await user_service.get_user_by_email(session, email=email)
    if user is None or not user.is_active:
        logger.warning("Login rejected for unknown or inactive account")
        return None
    if not verify_password(password, user.hashed_password):
        logger.warning("Login rejected for user %s: bad password", user.id)
        return None
    return user


def create_access_token_for_user(user: User) -> str:
    """Generate a JWT for a user."""
    return create_access_token(str(user.id), role=user.role.value)
