"""Staff user data access helpers."""
from __future__ import annotations

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.errors import (
    DuplicateName,
    InvalidName,
    NotFound,
    PreconditionFailed,
    ValidationError,
)
from hotel_ledger.core.security import get_password_hash
from hotel_ledger.models.reservation import Reservation
from hotel_ledger.models.user import User, UserRole
from hotel_ledger.security.sanitize import clean_name

logger = logging.getLogger(__name__)

FULL_NAME_MAX_LENGTH = 120
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128

_COMMON_PASSWORDS = frozenset(
    {
        "123456789012",
        "password123!",
        "motdepasse123",
        "azerty123456",
        "qwerty123456",
        "hotelease123",
        "admin1234",
    }
)
_FORBIDDEN_NAME_FRAGMENTS = (
    "javascript:",
    "eval(",
    "alert(",
    "confirm(",
    "prompt(",
    "onload=",
    "onerror=",
)


def normalize_email(raw: str) -> str:
    return raw.strip().lower()


def validate_full_name(raw: str) -> str:
    lowered = raw.lower()
    if any(fragment in lowered for fragment in _FORBIDDEN_NAME_FRAGMENTS):
        raise InvalidName("Name contains forbidden content", field="full_name")
    name = clean_name(raw)
    if not 2 <= len(name) <= FULL_NAME_MAX_LENGTH:
        raise InvalidName(
            f"Name must be between 2 and {FULL_NAME_MAX_LENGTH} characters",
            field="full_name",
        )
    return name


def validate_password(password: str) -> str:
    """Reject short, letter-only, digit-only and well-known passwords."""
    if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
        raise ValidationError(
            f"Password must be between {PASSWORD_MIN_LENGTH} and "
            f"{PASSWORD_MAX_LENGTH} characters",
            field="password",
        )
    if not any(ch.isalpha() for ch in password) or not any(ch.isdigit() for ch in password):
        raise ValidationError(
            "Password must contain at least one letter and one digit", field="password"
        )
    if password.lower() in _COMMON_PASSWORDS:
        raise ValidationError("Password is too common", field="password")
    return password


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Return a user by email address."""
    result = await session.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Return a user by ID."""
    return await session.get(User, user_id)


async def require_user(session: AsyncSession, *, user_id: uuid.UUID) -> User:
    user = await get_user(session, user_id)
    if user is None:
        raise NotFound("User not found", user_id=str(user_id))
    return user


async def list_users(session: AsyncSession, *, skip: int = 0, limit: int = 50) -> list[User]:
    result = await session.execute(
        select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all())


async def reservation_count(session: AsyncSession, *, user_id: uuid.UUID) -> int:
    """Number of reservations the user booked."""
    stmt = select(func.count()).select_from(Reservation).where(
        Reservation.created_by_id == user_id
    )
    return int((await session.execute(stmt)).scalar_one())


async def _ensure_email_free(
    session: AsyncSession, email: str, exclude_id: uuid.UUID | None = None
) -> None:
    stmt = select(User.id).where(User.email == email)
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    existing = (await session.execute(stmt)).scalar_one_or_none()
    if existing is not None:
        logger.warning("Duplicate user email rejected: %s", email)
        raise DuplicateName(
            "A user with this email already exists",
            email=email,
            existing_id=str(existing),
        )


async def _commit(session: AsyncSession, user: User) -> User:
    email = user.email
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        logger.warning("Duplicate user email rejected by the store: %s", email)
        raise DuplicateName("A user with this email already exists", email=email) from exc
    await session.refresh(user)
    return user


async def create_user(
    session: AsyncSession,
    *,
    email: str,
    password: str,
    full_name: str,
    role: UserRole = UserRole.RECEPTIONIST,
    is_active: bool = True,
) -> User:
    """Persist a new staff user with a hashed password."""
    clean_email = normalize_email(email)
    user = User(
        email=clean_email,
        hashed_password=get_password_hash(validate_password(password)),
        full_name=validate_full_name(full_name),
        role=role,
        is_active=is_active,
    )
    await _ensure_email_free(session, clean_email)
    session.add(user)
    user = await _commit(session, user)
    logger.info("User %s created with role %s", user.id, user.role.value)
    return user


async def update_user(
    session: AsyncSession,
    *,
    actor: User,
    user: User,
    email: str | None = None,
    full_name: str | None = None,
    password: str | None = None,
    role: UserRole | None = None,
    is_active: bool | None = None,
) -> tuple[User, list[str]]:
    """Update a staff account; returns the user and the names of changed fields.

    Staff cannot change their own role or deactivate their own account.
    """
    is_self = actor.id == user.id
    changed: list[str] = []
    if role is not None and role != user.role:
        if is_self:
            raise PreconditionFailed("You cannot change your own role", user_id=str(user.id))
        user.role = role
        changed.append("role")
    if is_active is not None and is_active != user.is_active:
        if is_self and not is_active:
            raise PreconditionFailed(
                "You cannot deactivate your own account", user_id=str(user.id)
            )
        user.is_active = is_active
        changed.append("is_active")
    if email is not None:
        clean_email = normalize_email(email)
        if clean_email != user.email:
            await _ensure_email_free(session, clean_email, exclude_id=user.id)
            user.email = clean_email
            changed.append("email")
    if full_name is not None:
        name = validate_full_name(full_name)
        if name != user.full_name:
            user.full_name = name
            changed.append("full_name")
    if password is not None:
        user.hashed_password = get_password_hash(validate_password(password))
        changed.append("password")
    user = await _commit(session, user)
    if changed:
        logger.info("User %s updated: %s", user.id, changed)
    return user, changed
