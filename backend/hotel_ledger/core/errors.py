"""Business-rule rejections raised by the ledger core.

Every rejection carries a machine-checkable ``kind``, a human ``message`` and
a ``context`` mapping with the ids/ranges a caller needs to resolve it. None of
them is retried: they are deterministic outcomes, not transient failures.
Store failures are not wrapped and surface as SQLAlchemy errors.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

StoreError = SQLAlchemyError


class LedgerError(Exception):
    """Base class for all rejections raised by the ledger core."""

    kind = "ledger_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def as_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "detail": self.message, "context": self.context}


class ValidationError(LedgerError, ValueError):
    """Malformed or out-of-range input."""

    kind = "validation_error"


class InvalidAmount(ValidationError):
    kind = "invalid_amount"


class InvalidQuantity(ValidationError):
    kind = "invalid_quantity"


class InvalidDateRange(ValidationError):
    kind = "invalid_date_range"


class InvalidName(ValidationError):
    kind = "invalid_name"


class InvalidStatusTransition(ValidationError):
    kind = "invalid_status_transition"


class NotFound(LedgerError):
    kind = "not_found"


class Conflict(LedgerError):
    kind = "conflict"


class DuplicateName(Conflict):
    kind = "duplicate_name"


class AlreadyAttached(Conflict):
    kind = "already_attached"


class RoomUnavailable(Conflict):
    kind = "room_unavailable"


class PreconditionFailed(LedgerError):
    kind = "precondition_failed"


class InUse(PreconditionFailed):
    kind = "in_use"


class HasPayments(PreconditionFailed):
    kind = "has_payments"


class HasActiveReservations(PreconditionFailed):
    kind = "has_active_reservations"


class ExceedsRemaining(PreconditionFailed):
    kind = "exceeds_remaining"


class PermissionDenied(LedgerError):
    kind = "permission_denied"


__all__ = [
    "AlreadyAttached",
    "Conflict",
    "DuplicateName",
    "ExceedsRemaining",
    "HasActiveReservations",
    "HasPayments",
    "InUse",
    "InvalidAmount",
    "InvalidDateRange",
    "InvalidName",
    "InvalidQuantity",
    "InvalidStatusTransition",
    "LedgerError",
    "NotFound",
    "PermissionDenied",
    "PreconditionFailed",
    "RoomUnavailable",
    "StoreError",
    "ValidationError",
]
