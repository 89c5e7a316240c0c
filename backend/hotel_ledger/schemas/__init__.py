"""Schema exports."""

from hotel_ledger.schemas.auth import Token
from hotel_ledger.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from hotel_ledger.schemas.ledger import LedgerSummaryRead
from hotel_ledger.schemas.payment import PaymentCreate, PaymentRead, PaymentUpdate
from hotel_ledger.schemas.reservation import (
    ReservationCreate,
    ReservationRead,
    ReservationUpdate,
    ServiceLineCreate,
    ServiceLineRead,
    ServiceLineUpdate,
)
from hotel_ledger.schemas.room import RoomCalendarEntry, RoomCreate, RoomRead, RoomUpdate
from hotel_ledger.schemas.service_item import (
    ServiceItemCreate,
    ServiceItemRead,
    ServiceItemUpdate,
    ServiceItemUsage,
)
from hotel_ledger.schemas.user import UserCreate, UserRead, UserUpdate

__all__ = [
    "CustomerCreate",
    "CustomerRead",
    "CustomerUpdate",
    "LedgerSummaryRead",
    "PaymentCreate",
    "PaymentRead",
    "PaymentUpdate",
    "ReservationCreate",
    "ReservationRead",
    "ReservationUpdate",
    "RoomCalendarEntry",
    "RoomCreate",
    "RoomRead",
    "RoomUpdate",
    "ServiceItemCreate",
    "ServiceItemRead",
    "ServiceItemUpdate",
    "ServiceItemUsage",
    "ServiceLineCreate",
    "ServiceLineRead",
    "ServiceLineUpdate",
    "Token",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
