"""ORM models package export."""

from hotel_ledger.models.audit_event import AuditEvent
from hotel_ledger.models.customer import Customer
from hotel_ledger.models.payment import (
    Payment,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)
from hotel_ledger.models.reservation import (
    Reservation,
    ReservationServiceLine,
    ReservationStatus,
)
from hotel_ledger.models.room import Room, RoomState, RoomType
from hotel_ledger.models.service_item import ServiceItem
from hotel_ledger.models.user import User, UserRole

__all__ = [
    "AuditEvent",
    "Customer",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentType",
    "Reservation",
    "ReservationServiceLine",
    "ReservationStatus",
    "Room",
    "RoomState",
    "RoomType",
    "ServiceItem",
    "User",
    "UserRole",
]
