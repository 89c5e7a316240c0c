"""Staff user schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from hotel_ledger.models.user import UserRole

_PLACEHOLDER_EMAIL_SUFFIXES = (".local", ".test", ".localhost")
_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def _validate_relaxed_email(value: str) -> str:
    """Accept placeholder domains (*.local, *.test) while keeping core validation."""

    email = value.strip()
    try:
        return _EMAIL_ADAPTER.validate_python(email)
    except PydanticValidationError:
        local_part, _, domain = email.partition("@")
        if local_part and domain and " " not in email:
            if domain.lower().endswith(_PLACEHOLDER_EMAIL_SUFFIXES):
                return email
        raise


class UserCreate(BaseModel):
    """Payload for creating a staff account."""

    email: str = Field(max_length=180)
    full_name: str = Field(max_length=120)
    password: str
    role: UserRole = UserRole.RECEPTIONIST
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return _validate_relaxed_email(value)


class UserUpdate(BaseModel):
    """Mutable staff account fields."""

    email: str | None = Field(default=None, max_length=180)
    full_name: str | None = Field(default=None, max_length=120)
    password: str | None = None
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _validate_relaxed_email(value)


class UserRead(BaseModel):
    """Serialized staff account; never includes the password hash."""

    id: uuid.UUID
    email: str
    full_name: str
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
