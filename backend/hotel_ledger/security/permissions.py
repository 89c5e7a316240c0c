"""Single authorization decision point for back-office actions."""

from __future__ import annotations

import enum
from typing import Any

from hotel_ledger.core.errors import PermissionDenied
from hotel_ledger.models.user import User, UserRole


class Action(str, enum.Enum):
    RESERVATION_READ = "reservation.read"
    RESERVATION_CREATE = "reservation.create"
    RESERVATION_UPDATE = "reservation.update"
    RESERVATION_DELETE = "reservation.delete"
    RESERVATION_BACKDATE = "reservation.backdate"
    SERVICE_LINE_WRITE = "service_line.write"
    CATALOG_READ = "catalog.read"
    CATALOG_WRITE = "catalog.write"
    PAYMENT_READ = "payment.read"
    PAYMENT_RECORD = "payment.record"
    PAYMENT_UPDATE = "payment.update"
    PAYMENT_DELETE = "payment.delete"
    ROOM_READ = "room.read"
    ROOM_WRITE = "room.write"
    ROOM_DELETE = "room.delete"
    CUSTOMER_READ = "customer.read"
    CUSTOMER_WRITE = "customer.write"
    CUSTOMER_DELETE = "customer.delete"
    USER_MANAGE = "user.manage"


_RECEPTIONIST_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.RESERVATION_READ,
        Action.RESERVATION_CREATE,
        Action.RESERVATION_UPDATE,
        Action.SERVICE_LINE_WRITE,
        Action.CATALOG_READ,
        Action.CATALOG_WRITE,
        Action.PAYMENT_READ,
        Action.PAYMENT_RECORD,
        Action.ROOM_READ,
        Action.CUSTOMER_READ,
        Action.CUSTOMER_WRITE,
    }
)

_ROLE_ACTIONS: dict[UserRole, frozenset[Action]] = {
    UserRole.ADMIN: frozenset(Action),
    UserRole.RECEPTIONIST: _RECEPTIONIST_ACTIONS,
}


def can(user: User | None, action: Action, resource: Any = None) -> bool:
    """Return whether ``user`` may perform ``action`` on ``resource``."""
    if user is None or not user.is_active:
        return False
    return action in _ROLE_ACTIONS.get(user.role, frozenset())


def ensure_can(user: User | None, action: Action, resource: Any = None) -> None:
    """Raise :class:`PermissionDenied` unless :func:`can` allows the action."""
    if not can(user, action, resource):
        raise PermissionDenied(
            "Insufficient permissions",
            action=action.value,
            user_id=str(user.id) if user is not None else None,
        )


__all__ = ["Action", "can", "ensure_can"]
