"""Reservation orchestration: bookings, service lines and payments.

Every public operation of :class:`ReconciliationFacade` follows the same
shape. It authorizes the actor once, locks the row that serializes the
mutation, delegates to the ledger services, refreshes the reservation's
cached total, records one audit event and commits. Any failure rolls the
whole transaction back.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_ledger.core.clock import Clock, SystemClock, today
from hotel_ledger.core.config import Settings, get_settings
from hotel_ledger.core.errors import (
    HasActiveReservations,
    HasPayments,
    InUse,
    InvalidDateRange,
    InvalidStatusTransition,
    NotFound,
    PreconditionFailed,
    RoomUnavailable,
)
from hotel_ledger.core.money import RESERVATION_BASE_BOUNDS, Money, check_bounds
from hotel_ledger.models.payment import Payment, PaymentMethod, PaymentType
from hotel_ledger.models.reservation import (
    Reservation,
    ReservationServiceLine,
    ReservationStatus,
)
from hotel_ledger.models.room import Room, RoomState
from hotel_ledger.models.service_item import ServiceItem
from hotel_ledger.models.user import User
from hotel_ledger.security.permissions import Action, can, ensure_can
from hotel_ledger.security.sanitize import clean_text
from hotel_ledger.services import (
    availability_service,
    customer_service,
    payment_ledger_service,
    reservation_ledger_service,
    room_service,
    service_catalog_service,
    user_service,
)
from hotel_ledger.services.audit_service import AuditSink, DatabaseAuditSink
from hotel_ledger.services.payment_ledger_service import LedgerSummary

logger = logging.getLogger(__name__)

NOTES_MAX_LENGTH = 1024

_ALLOWED_STATUS_TRANSITIONS: dict[ReservationStatus, set[ReservationStatus]] = {
    ReservationStatus.PENDING: {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED},
    ReservationStatus.CONFIRMED: {
        ReservationStatus.IN_PROGRESS,
        ReservationStatus.CANCELLED,
    },
    ReservationStatus.IN_PROGRESS: {
        ReservationStatus.COMPLETED,
        ReservationStatus.CANCELLED,
    },
    ReservationStatus.COMPLETED: set(),
    ReservationStatus.CANCELLED: set(),
}


def validate_status_transition(current: ReservationStatus, target: ReservationStatus) -> None:
    if target == current:
        return
    allowed = _ALLOWED_STATUS_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise InvalidStatusTransition(
            f"Invalid status transition from {current.value} to {target.value}",
            current=current.value,
            target=target.value,
            allowed=sorted(status.value for status in allowed),
        )


class ReconciliationFacade:
    """Entry point for every reservation ledger mutation."""

    def __init__(
        self,
        session: AsyncSession,
        *,
        clock: Clock | None = None,
        audit: AuditSink | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._session = session
        self._clock = clock or SystemClock()
        self._audit = audit or DatabaseAuditSink()
        self._settings = settings or get_settings()

    @property
    def clock(self) -> Clock:
        return self._clock

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[None]:
        try:
            yield
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise

    async def _record(
        self,
        actor: User,
        event_type: str,
        description: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        await self._audit.record(
            self._session,
            event_type=event_type,
            user_id=actor.id,
            description=description,
            payload=payload,
        )

    async def _load_reservation(self, reservation_id: uuid.UUID) -> Reservation:
        reservation = await self._session.get(
            Reservation, reservation_id, populate_existing=True
        )
        if reservation is None:
            raise NotFound("Reservation not found", reservation_id=str(reservation_id))
        return reservation

    async def _lock_reservation(self, reservation_id: uuid.UUID) -> Reservation:
        result = await self._session.execute(
            update(Reservation)
            .where(Reservation.id == reservation_id)
            .values(lock_version=Reservation.lock_version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFound("Reservation not found", reservation_id=str(reservation_id))
        return await self._load_reservation(reservation_id)

    async def _bookable_room(self, room_id: uuid.UUID) -> Room:
        await availability_service.lock_room(self._session, room_id=room_id)
        room = await self._session.get(Room, room_id, populate_existing=True)
        if room is None:
            raise NotFound("Room not found", room_id=str(room_id))
        if room.state == RoomState.OUT_OF_SERVICE:
            logger.warning("Booking rejected: room %s is out of service", room.number)
            raise RoomUnavailable(
                "Room is out of service", room_id=str(room.id), room_state=room.state.value
            )
        return room

    def _validate_dates(self, actor: User, start: date, end: date, *, check_past: bool) -> None:
        if end <= start:
            raise InvalidDateRange(
                "End date must be after start date",
                start=start.isoformat(),
                end=end.isoformat(),
            )
        nights = (end - start).days
        if nights > self._settings.max_reservation_days:
            raise InvalidDateRange(
                f"A reservation cannot exceed {self._settings.max_reservation_days} days",
                start=start.isoformat(),
                end=end.isoformat(),
                nights=nights,
            )
        if check_past and start < today(self._clock) and not can(
            actor, Action.RESERVATION_BACKDATE
        ):
            raise InvalidDateRange(
                "Start date cannot be in the past",
                start=start.isoformat(),
                today=today(self._clock).isoformat(),
            )

    async def _ensure_free(
        self,
        *,
        room: Room,
        start: date,
        end: date,
        exclude_reservation_id: uuid.UUID | None = None,
    ) -> None:
        conflict = await availability_service.find_conflict(
            self._session,
            room_id=room.id,
            start=start,
            end=end,
            exclude_reservation_id=exclude_reservation_id,
        )
        if conflict is not None:
            logger.warning(
                "Booking rejected: room %s already reserved %s..%s by %s",
                room.number,
                conflict.start_date,
                conflict.end_date,
                conflict.id,
            )
            raise RoomUnavailable(
                "Room is already reserved for these dates",
                room_id=str(room.id),
                conflicting_reservation_id=str(conflict.id),
                conflicting_start=conflict.start_date.isoformat(),
                conflicting_end=conflict.end_date.isoformat(),
            )

    # Reservations -----------------------------------------------------------

    async def get_reservation(self, actor: User, *, reservation_id: uuid.UUID) -> Reservation:
        ensure_can(actor, Action.RESERVATION_READ)
        return await self._load_reservation(reservation_id)

    async def list_reservations(
        self,
        actor: User,
        *,
        room_id: uuid.UUID | None = None,
        customer_id: uuid.UUID | None = None,
        status: ReservationStatus | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Reservation]:
        ensure_can(actor, Action.RESERVATION_READ)
        stmt = select(Reservation).order_by(Reservation.start_date.desc())
        if room_id is not None:
            stmt = stmt.where(Reservation.room_id == room_id)
        if customer_id is not None:
            stmt = stmt.where(Reservation.customer_id == customer_id)
        if status is not None:
            stmt = stmt.where(Reservation.status == status)
        result = await self._session.execute(stmt.offset(skip).limit(limit))
        return list(result.scalars().unique().all())

    async def create_reservation(
        self,
        actor: User,
        *,
        room_id: uuid.UUID,
        customer_id: uuid.UUID,
        start_date: date,
        end_date: date,
        base_amount: Money | Decimal | str | None = None,
        status: ReservationStatus = ReservationStatus.PENDING,
        notes: str | None = None,
    ) -> Reservation:
        """Book a room, rejecting overlaps with any non-cancelled reservation.

        Without an explicit ``base_amount`` the room charge is the room's
        nightly price times the number of nights.
        """
        ensure_can(actor, Action.RESERVATION_CREATE)
        self._validate_dates(actor, start_date, end_date, check_past=True)
        if status in (ReservationStatus.COMPLETED, ReservationStatus.CANCELLED):
            raise InvalidStatusTransition(
                "A reservation cannot be created as completed or cancelled",
                target=status.value,
            )
        async with self._transaction():
            await customer_service.require_customer(self._session, customer_id=customer_id)
            room = await self._bookable_room(room_id)
            if base_amount is None:
                base = room.price.multiply((end_date - start_date).days)
                base = RESERVATION_BASE_BOUNDS.check(base)
            else:
                base = check_bounds(base_amount, RESERVATION_BASE_BOUNDS)
            await self._ensure_free(room=room, start=start_date, end=end_date)
            reservation = Reservation(
                room_id=room.id,
                customer_id=customer_id,
                created_by_id=actor.id,
                status=status,
                start_date=start_date,
                end_date=end_date,
                base_amount=base,
                total_amount=base,
                notes=clean_text(notes, NOTES_MAX_LENGTH),
            )
            self._session.add(reservation)
            await self._session.flush()
            await self._record(
                actor,
                "reservation.created",
                f"Reservation {reservation.id} for room {room.number}",
                {
                    "reservation_id": str(reservation.id),
                    "room_id": str(room.id),
                    "start_date": start_date.isoformat(),
                    "end_date": end_date.isoformat(),
                    "base_amount": str(base),
                },
            )
        logger.info(
            "Reservation %s created on room %s for %s..%s",
            reservation.id,
            room.number,
            start_date,
            end_date,
        )
        return await self._load_reservation(reservation.id)

    async def update_reservation(
        self,
        actor: User,
        *,
        reservation_id: uuid.UUID,
        room_id: uuid.UUID | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: ReservationStatus | None = None,
        base_amount: Money | Decimal | str | None = None,
        notes: str | None = None,
    ) -> Reservation:
        """Move, reprice or transition a reservation.

        Moving to another room or other dates re-runs the availability check
        against every other reservation of the target room.
        """
        ensure_can(actor, Action.RESERVATION_UPDATE)
        async with self._transaction():
            current = await self._load_reservation(reservation_id)
            new_room_id = room_id if room_id is not None else current.room_id
            new_start = start_date if start_date is not None else current.start_date
            new_end = end_date if end_date is not None else current.end_date
            moved = (
                new_room_id != current.room_id
                or new_start != current.start_date
                or new_end != current.end_date
            )
            changes: dict[str, dict[str, str]] = {}

            if status is not None:
                validate_status_transition(current.status, status)
            if moved:
                if current.status in (ReservationStatus.COMPLETED, ReservationStatus.CANCELLED):
                    raise InvalidStatusTransition(
                        f"A {current.status.value} reservation cannot be moved",
                        current=current.status.value,
                    )
                self._validate_dates(
                    actor, new_start, new_end, check_past=new_start != current.start_date
                )
                room = await self._bookable_room(new_room_id)
                reservation = await self._lock_reservation(reservation_id)
                await self._ensure_free(
                    room=room,
                    start=new_start,
                    end=new_end,
                    exclude_reservation_id=reservation.id,
                )
                if new_room_id != reservation.room_id:
                    changes["room_id"] = {
                        "old": str(reservation.room_id),
                        "new": str(new_room_id),
                    }
                    reservation.room_id = new_room_id
                if new_start != reservation.start_date:
                    changes["start_date"] = {
                        "old": reservation.start_date.isoformat(),
                        "new": new_start.isoformat(),
                    }
                    reservation.start_date = new_start
                if new_end != reservation.end_date:
                    changes["end_date"] = {
                        "old": reservation.end_date.isoformat(),
                        "new": new_end.isoformat(),
                    }
                    reservation.end_date = new_end
            else:
                reservation = await self._lock_reservation(reservation_id)

            if status is not None and status != reservation.status:
                changes["status"] = {"old": reservation.status.value, "new": status.value}
                reservation.status = status
            if base_amount is not None:
                base = check_bounds(base_amount, RESERVATION_BASE_BOUNDS)
                if base != reservation.base_amount:
                    changes["base_amount"] = {
                        "old": str(reservation.base_amount),
                        "new": str(base),
                    }
                    reservation.base_amount = base
            if notes is not None:
                reservation.notes = clean_text(notes, NOTES_MAX_LENGTH)
            await self._session.flush()
            await reservation_ledger_service.refresh_total_cache(
                self._session, reservation=reservation
            )
            await self._record(
                actor,
                "reservation.updated",
                f"Reservation {reservation.id} updated",
                {"reservation_id": str(reservation.id), "changes": changes},
            )
        logger.info("Reservation %s updated: %s", reservation_id, sorted(changes))
        return await self._load_reservation(reservation_id)

    async def delete_reservation(self, actor: User, *, reservation_id: uuid.UUID) -> None:
        """Delete a reservation without financial history, with its service lines."""
        ensure_can(actor, Action.RESERVATION_DELETE)
        async with self._transaction():
            reservation = await self._lock_reservation(reservation_id)
            count = await payment_ledger_service.payment_count(
                self._session, reservation_id=reservation.id
            )
            if count:
                logger.warning(
                    "Deletion of reservation %s rejected: %s payments recorded",
                    reservation.id,
                    count,
                )
                raise HasPayments(
                    "Reservation has payments and cannot be deleted",
                    reservation_id=str(reservation.id),
                    payment_count=count,
                )
            await self._session.delete(reservation)
            await self._session.flush()
            await self._record(
                actor,
                "reservation.deleted",
                f"Reservation {reservation_id} deleted",
                {"reservation_id": str(reservation_id)},
            )
        logger.info("Reservation %s deleted", reservation_id)

    # Rooms and customers ----------------------------------------------------

    async def _reservation_counts(self, column, entity_id: uuid.UUID) -> tuple[int, int]:
        """Return (active, total) reservation counts for a room or customer."""
        active_stmt = select(func.count()).select_from(Reservation).where(
            column == entity_id, Reservation.end_date >= today(self._clock)
        )
        total_stmt = select(func.count()).select_from(Reservation).where(column == entity_id)
        active = int((await self._session.execute(active_stmt)).scalar_one())
        total = int((await self._session.execute(total_stmt)).scalar_one())
        return active, total

    async def delete_room(self, actor: User, *, room_id: uuid.UUID) -> None:
        ensure_can(actor, Action.ROOM_DELETE)
        async with self._transaction():
            await availability_service.lock_room(self._session, room_id=room_id)
            room = await room_service.require_room(self._session, room_id=room_id)
            active, total = await self._reservation_counts(Reservation.room_id, room.id)
            if active:
                logger.warning("Deletion of room %s rejected: active reservations", room.number)
                raise HasActiveReservations(
                    "Room has current or upcoming reservations",
                    room_id=str(room.id),
                    active_reservations=active,
                )
            if total:
                raise InUse(
                    "Room has reservation history and cannot be deleted",
                    room_id=str(room.id),
                    reservations=total,
                )
            await self._session.delete(room)
            await self._session.flush()
            await self._record(
                actor,
                "room.deleted",
                f"Room {room.number} deleted",
                {"room_id": str(room_id), "number": room.number},
            )
        logger.info("Room %s deleted", room_id)

    async def delete_customer(self, actor: User, *, customer_id: uuid.UUID) -> None:
        ensure_can(actor, Action.CUSTOMER_DELETE)
        async with self._transaction():
            customer = await customer_service.require_customer(
                self._session, customer_id=customer_id
            )
            active, total = await self._reservation_counts(
                Reservation.customer_id, customer.id
            )
            if active:
                logger.warning("Deletion of customer %s rejected: active reservations", customer.id)
                raise HasActiveReservations(
                    "Customer has current or upcoming reservations",
                    customer_id=str(customer.id),
                    active_reservations=active,
                )
            if total:
                raise InUse(
                    "Customer has reservation history and cannot be deleted",
                    customer_id=str(customer.id),
                    reservations=total,
                )
            await self._session.delete(customer)
            await self._session.flush()
            await self._record(
                actor,
                "customer.deleted",
                f"Customer {customer_id} deleted",
                {"customer_id": str(customer_id)},
            )
        logger.info("Customer %s deleted", customer_id)

    async def delete_user(self, actor: User, *, user_id: uuid.UUID) -> None:
        """Delete a staff account that never booked a reservation."""
        ensure_can(actor, Action.USER_MANAGE)
        if user_id == actor.id:
            logger.warning("User %s attempted to delete their own account", actor.id)
            raise PreconditionFailed("You cannot delete your own account", user_id=str(user_id))
        async with self._transaction():
            user = await user_service.require_user(self._session, user_id=user_id)
            count = await user_service.reservation_count(self._session, user_id=user_id)
            if count:
                logger.warning("Deletion of user %s rejected: %s reservations", user_id, count)
                raise InUse(
                    "User has booked reservations and cannot be deleted",
                    user_id=str(user_id),
                    reservations=count,
                )
            await self._session.delete(user)
            await self._session.flush()
            await self._record(
                actor,
                "user.deleted",
                f"User {user_id} deleted",
                {"user_id": str(user_id)},
            )
        logger.info("User %s deleted", user_id)

    # Service catalog ----------------------------------------------------------

    async def create_service_item(
        self, actor: User, *, name: str, price: Money | Decimal | str
    ) -> ServiceItem:
        ensure_can(actor, Action.CATALOG_WRITE)
        async with self._transaction():
            item = await service_catalog_service.create_item(
                self._session, name=name, price=price
            )
            await self._record(
                actor,
                "service_item.created",
                f"Service {item.name} created",
                {"service_item_id": str(item.id), "price": str(item.price)},
            )
        logger.info("Service %s created at %s", item.name, item.price)
        return item

    async def update_service_item(
        self,
        actor: User,
        *,
        item_id: uuid.UUID,
        name: str | None = None,
        price: Money | Decimal | str | None = None,
    ) -> ServiceItem:
        ensure_can(actor, Action.CATALOG_WRITE)
        async with self._transaction():
            item, changes = await service_catalog_service.update_item(
                self._session, item_id=item_id, name=name, price=price
            )
            await self._record(
                actor,
                "service_item.updated",
                f"Service {item.name} updated",
                {"service_item_id": str(item.id), "changes": changes},
            )
        return item

    async def delete_service_item(self, actor: User, *, item_id: uuid.UUID) -> None:
        ensure_can(actor, Action.CATALOG_WRITE)
        async with self._transaction():
            item = await service_catalog_service.delete_item(self._session, item_id=item_id)
            await self._record(
                actor,
                "service_item.deleted",
                f"Service {item.name} deleted",
                {"service_item_id": str(item_id)},
            )
        logger.info("Service %s deleted", item_id)

    # Service lines ------------------------------------------------------------

    async def list_service_lines(
        self, actor: User, *, reservation_id: uuid.UUID
    ) -> list[ReservationServiceLine]:
        ensure_can(actor, Action.RESERVATION_READ)
        await self._load_reservation(reservation_id)
        return await reservation_ledger_service.lines(
            self._session, reservation_id=reservation_id
        )

    async def attach_service(
        self,
        actor: User,
        *,
        reservation_id: uuid.UUID,
        service_item_id: uuid.UUID,
        quantity: int = 1,
    ) -> ReservationServiceLine:
        ensure_can(actor, Action.SERVICE_LINE_WRITE)
        reservation_ledger_service.validate_quantity(quantity)
        async with self._transaction():
            reservation = await self._lock_reservation(reservation_id)
            item = await service_catalog_service.require_item(
                self._session, item_id=service_item_id
            )
            line = await reservation_ledger_service.attach_service(
                self._session, reservation=reservation, item=item, quantity=quantity
            )
            total = await reservation_ledger_service.refresh_total_cache(
                self._session, reservation=reservation
            )
            await self._record(
                actor,
                "reservation.service_attached",
                f"Service {item.name} x{quantity} added to reservation {reservation.id}",
                {
                    "reservation_id": str(reservation.id),
                    "line_id": str(line.id),
                    "service_item_id": str(item.id),
                    "unit_price": str(line.unit_price),
                    "quantity": quantity,
                    "total": str(total),
                },
            )
        logger.info(
            "Service %s attached to reservation %s; total now %s",
            item.name,
            reservation_id,
            total,
        )
        return line

    async def detach_service(
        self, actor: User, *, reservation_id: uuid.UUID, line_id: uuid.UUID
    ) -> None:
        ensure_can(actor, Action.SERVICE_LINE_WRITE)
        async with self._transaction():
            reservation = await self._lock_reservation(reservation_id)
            line = await reservation_ledger_service.detach_service(
                self._session, reservation=reservation, line_id=line_id
            )
            total = await reservation_ledger_service.refresh_total_cache(
                self._session, reservation=reservation
            )
            await self._record(
                actor,
                "reservation.service_detached",
                f"Service line {line_id} removed from reservation {reservation.id}",
                {
                    "reservation_id": str(reservation.id),
                    "line_id": str(line_id),
                    "service_item_id": str(line.service_item_id),
                    "total": str(total),
                },
            )
        logger.info(
            "Service line %s removed from reservation %s; total now %s",
            line_id,
            reservation_id,
            total,
        )

    async def update_service_quantity(
        self,
        actor: User,
        *,
        reservation_id: uuid.UUID,
        line_id: uuid.UUID,
        quantity: int,
    ) -> ReservationServiceLine:
        ensure_can(actor, Action.SERVICE_LINE_WRITE)
        reservation_ledger_service.validate_quantity(quantity)
        async with self._transaction():
            reservation = await self._lock_reservation(reservation_id)
            line, previous = await reservation_ledger_service.update_quantity(
                self._session, reservation=reservation, line_id=line_id, quantity=quantity
            )
            total = await reservation_ledger_service.refresh_total_cache(
                self._session, reservation=reservation
            )
            await self._record(
                actor,
                "reservation.service_quantity_updated",
                f"Service line {line_id} quantity {previous} -> {quantity}",
                {
                    "reservation_id": str(reservation.id),
                    "line_id": str(line_id),
                    "old_quantity": previous,
                    "new_quantity": quantity,
                    "total": str(total),
                },
            )
        return line

    # Payments -----------------------------------------------------------------

    async def list_payments(self, actor: User, *, reservation_id: uuid.UUID) -> list[Payment]:
        ensure_can(actor, Action.PAYMENT_READ)
        await self._load_reservation(reservation_id)
        return await payment_ledger_service.payments(
            self._session, reservation_id=reservation_id
        )

    async def record_payment(
        self,
        actor: User,
        *,
        reservation_id: uuid.UUID,
        amount: Money | Decimal | str,
        method: PaymentMethod | str,
        payment_type: PaymentType | str = PaymentType.BALANCE,
        paid_at: datetime | None = None,
        transaction_ref: str | None = None,
        comment: str | None = None,
    ) -> Payment:
        """Record a payment or refund; ``paid_at`` defaults to now."""
        ensure_can(actor, Action.PAYMENT_RECORD)
        async with self._transaction():
            reservation = await self._lock_reservation(reservation_id)
            payment = await payment_ledger_service.record_payment(
                self._session,
                reservation=reservation,
                amount=amount,
                method=method,
                payment_type=payment_type,
                paid_at=paid_at if paid_at is not None else self._clock.now(),
                clock=self._clock,
                transaction_ref=transaction_ref,
                comment=comment,
                recorded_by_id=actor.id,
            )
            await reservation_ledger_service.refresh_total_cache(
                self._session, reservation=reservation
            )
            await self._record(
                actor,
                "payment.recorded",
                f"{payment.payment_type.value} of {payment.amount} on reservation {reservation.id}",
                {
                    "reservation_id": str(reservation.id),
                    "payment_id": str(payment.id),
                    "amount": str(payment.amount),
                    "method": payment.method.value,
                    "payment_type": payment.payment_type.value,
                },
            )
        logger.info(
            "Payment %s recorded: %s %s on reservation %s",
            payment.id,
            payment.payment_type.value,
            payment.amount,
            reservation_id,
        )
        return payment

    async def update_payment(
        self,
        actor: User,
        *,
        payment_id: uuid.UUID,
        amount: Money | Decimal | str | None = None,
        method: PaymentMethod | str | None = None,
        payment_type: PaymentType | str | None = None,
        paid_at: datetime | None = None,
        transaction_ref: str | None = None,
        comment: str | None = None,
    ) -> Payment:
        ensure_can(actor, Action.PAYMENT_UPDATE)
        async with self._transaction():
            payment = await payment_ledger_service.require_payment(
                self._session, payment_id=payment_id
            )
            reservation = await self._lock_reservation(payment.reservation_id)
            payment, changes = await payment_ledger_service.update_payment(
                self._session,
                payment=payment,
                reservation=reservation,
                clock=self._clock,
                amount=amount,
                method=method,
                payment_type=payment_type,
                paid_at=paid_at,
                transaction_ref=transaction_ref,
                comment=comment,
            )
            await reservation_ledger_service.refresh_total_cache(
                self._session, reservation=reservation
            )
            await self._record(
                actor,
                "payment.updated",
                f"Payment {payment.id} updated",
                {
                    "reservation_id": str(reservation.id),
                    "payment_id": str(payment.id),
                    "changes": changes,
                },
            )
        if changes:
            logger.info("Payment %s updated: %s", payment_id, changes)
        return payment

    async def delete_payment(self, actor: User, *, payment_id: uuid.UUID) -> None:
        ensure_can(actor, Action.PAYMENT_DELETE)
        async with self._transaction():
            payment = await payment_ledger_service.require_payment(
                self._session, payment_id=payment_id
            )
            reservation = await self._lock_reservation(payment.reservation_id)
            snapshot = {
                "reservation_id": str(reservation.id),
                "payment_id": str(payment.id),
                "amount": str(payment.amount),
                "payment_type": payment.payment_type.value,
            }
            await payment_ledger_service.delete_payment(self._session, payment=payment)
            await reservation_ledger_service.refresh_total_cache(
                self._session, reservation=reservation
            )
            await self._record(
                actor,
                "payment.deleted",
                f"Payment {payment_id} deleted from reservation {reservation.id}",
                snapshot,
            )
        logger.info("Payment %s deleted (%s)", payment_id, snapshot["amount"])

    # Ledger -------------------------------------------------------------------

    async def reservation_summary(
        self, actor: User, *, reservation_id: uuid.UUID
    ) -> LedgerSummary:
        ensure_can(actor, Action.PAYMENT_READ)
        reservation = await self._load_reservation(reservation_id)
        return await payment_ledger_service.summarize(self._session, reservation=reservation)


__all__ = ["ReconciliationFacade", "validate_status_transition"]
