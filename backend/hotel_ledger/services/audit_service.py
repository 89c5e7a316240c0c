"""Audit sink invoked by the facade after each successful mutation."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.models.audit_event import AuditEvent

logger = logging.getLogger(__name__)


class AuditSink(Protocol):
    async def record(
        self,
        session: AsyncSession,
        *,
        event_type: str,
        user_id: uuid.UUID | None,
        description: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None: ...


class DatabaseAuditSink:
    """Adds an :class:`AuditEvent` to the caller's transaction.

    The caller commits; the event is persisted exactly when the mutation it
    describes is.
    """

    async def record(
        self,
        session: AsyncSession,
        *,
        event_type: str,
        user_id: uuid.UUID | None,
        description: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        session.add(
            AuditEvent(
                user_id=user_id,
                event_type=event_type,
                description=description,
                payload=payload,
            )
        )
        logger.info("audit %s by %s: %s", event_type, user_id, description)


__all__ = ["AuditSink", "DatabaseAuditSink"]
