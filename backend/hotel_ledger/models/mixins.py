"""Common ORM mixins."""
from datetime import UTC, datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TimestampMixin:
    """Adds created/updated timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )


class LockCounterMixin:
    """Row counter bumped inside a transaction to serialize writers.

    An ``UPDATE ... SET lock_version = lock_version + 1`` takes a row lock on
    PostgreSQL and the database write lock on SQLite, so whoever bumps second
    waits for the first transaction to finish and then reads its result.
    """

    lock_version: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
