"""Facade-level rules: lifecycle, deletion guards, permissions and audit."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Any

import pytest
from sqlalchemy import select

from hotel_ledger.core.errors import (
    HasActiveReservations,
    HasPayments,
    InUse,
    InvalidDateRange,
    InvalidStatusTransition,
    NotFound,
    PermissionDenied,
    RoomUnavailable,
)
from hotel_ledger.core.money import Money
from hotel_ledger.db.session import get_sessionmaker
from hotel_ledger.models import AuditEvent, ReservationServiceLine, ReservationStatus
from hotel_ledger.services import customer_service
from hotel_ledger.services.reconciliation_service import (
    ReconciliationFacade,
    validate_status_transition,
)

pytestmark = pytest.mark.asyncio


class RecordingAuditSink:
    def __init__(self) -> None:
        self.events: list[tuple[str, uuid.UUID | None, dict[str, Any] | None]] = []

    async def record(self, session, *, event_type, user_id, description=None, payload=None):
        self.events.append((event_type, user_id, payload))


async def _create(db_url: str, clock, seed: dict[str, Any], actor_key: str = "admin", **overrides):
    params = {
        "room_id": seed["room"].id,
        "customer_id": seed["customer"].id,
        "start_date": date(2025, 6, 1),
        "end_date": date(2025, 6, 3),
        "base_amount": "100.00",
    }
    params.update(overrides)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        return await facade.create_reservation(seed[actor_key], **params)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (ReservationStatus.PENDING, ReservationStatus.CONFIRMED),
        (ReservationStatus.PENDING, ReservationStatus.CANCELLED),
        (ReservationStatus.CONFIRMED, ReservationStatus.IN_PROGRESS),
        (ReservationStatus.IN_PROGRESS, ReservationStatus.COMPLETED),
        (ReservationStatus.IN_PROGRESS, ReservationStatus.CANCELLED),
        (ReservationStatus.COMPLETED, ReservationStatus.COMPLETED),
    ],
)
async def test_allowed_status_transitions(current, target) -> None:
    validate_status_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (ReservationStatus.PENDING, ReservationStatus.IN_PROGRESS),
        (ReservationStatus.CONFIRMED, ReservationStatus.PENDING),
        (ReservationStatus.COMPLETED, ReservationStatus.CANCELLED),
        (ReservationStatus.CANCELLED, ReservationStatus.CONFIRMED),
    ],
)
async def test_rejected_status_transitions(current, target) -> None:
    with pytest.raises(InvalidStatusTransition):
        validate_status_transition(current, target)


async def test_reservation_lifecycle_through_facade(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _create(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        for status in (
            ReservationStatus.CONFIRMED,
            ReservationStatus.IN_PROGRESS,
            ReservationStatus.COMPLETED,
        ):
            updated = await facade.update_reservation(
                admin, reservation_id=reservation.id, status=status
            )
            assert updated.status == status

        with pytest.raises(InvalidStatusTransition):
            await facade.update_reservation(
                admin, reservation_id=reservation.id, status=ReservationStatus.CANCELLED
            )
        with pytest.raises(InvalidStatusTransition):
            await facade.update_reservation(
                admin, reservation_id=reservation.id, end_date=date(2025, 6, 4)
            )

    with pytest.raises(InvalidStatusTransition):
        await _create(
            db_url,
            clock,
            ledger_seed,
            start_date=date(2025, 7, 1),
            end_date=date(2025, 7, 2),
            status=ReservationStatus.CANCELLED,
        )


async def test_update_reprices_and_keeps_total_in_sync(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _create(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["parking"].id,
            quantity=2,
        )
        updated = await facade.update_reservation(
            admin,
            reservation_id=reservation.id,
            base_amount="80.00",
            notes="  Late arrival ",
        )
    assert updated.base_amount == Money(8000)
    assert updated.total_amount == Money(10400)
    assert updated.notes == "Late arrival"


async def test_delete_reservation_with_payments_is_refused(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _create(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        await facade.record_payment(
            admin, reservation_id=reservation.id, amount="20.00", method="cash"
        )
        with pytest.raises(HasPayments) as excinfo:
            await facade.delete_reservation(admin, reservation_id=reservation.id)
        assert excinfo.value.context["payment_count"] == 1

        still_there = await facade.get_reservation(admin, reservation_id=reservation.id)
        assert still_there.id == reservation.id


async def test_delete_reservation_removes_service_lines(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _create(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["breakfast"].id,
        )

    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        await facade.delete_reservation(admin, reservation_id=reservation.id)
        with pytest.raises(NotFound):
            await facade.get_reservation(admin, reservation_id=reservation.id)
        remaining = (
            await session.execute(
                select(ReservationServiceLine).where(
                    ReservationServiceLine.reservation_id == reservation.id
                )
            )
        ).scalars().all()
        assert remaining == []


async def test_room_deletion_guards(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    upcoming = await _create(db_url, clock, ledger_seed)
    await _create(
        db_url,
        clock,
        ledger_seed,
        room_id=ledger_seed["other_room"].id,
        start_date=date(2025, 3, 1),
        end_date=date(2025, 3, 4),
    )

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        with pytest.raises(HasActiveReservations) as excinfo:
            await facade.delete_room(admin, room_id=ledger_seed["room"].id)
        assert excinfo.value.context["active_reservations"] == 1

        with pytest.raises(InUse):
            await facade.delete_room(admin, room_id=ledger_seed["other_room"].id)

        await facade.delete_room(admin, room_id=ledger_seed["closed_room"].id)
        with pytest.raises(NotFound):
            await facade.delete_room(admin, room_id=ledger_seed["closed_room"].id)

        # cancelling does not release a room whose stay has not ended
        await facade.update_reservation(
            admin, reservation_id=upcoming.id, status=ReservationStatus.CANCELLED
        )
        with pytest.raises(HasActiveReservations):
            await facade.delete_room(admin, room_id=ledger_seed["room"].id)


async def test_customer_deletion_guards(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    await _create(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        newcomer = await customer_service.create_customer(
            session,
            first_name="jean-luc",
            last_name="o'neil",
            phone_number="+33 6 98 76 54 32",
        )
        newcomer_id = newcomer.id
        assert newcomer.first_name == "Jean-Luc"
        assert newcomer.phone_number == "+33698765432"

    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        with pytest.raises(HasActiveReservations):
            await facade.delete_customer(admin, customer_id=ledger_seed["customer"].id)

        await facade.delete_customer(admin, customer_id=newcomer_id)
        assert await customer_service.get_customer(session, customer_id=newcomer_id) is None


async def test_receptionist_permissions(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    receptionist = ledger_seed["receptionist"]
    reservation = await _create(db_url, clock, ledger_seed, actor_key="receptionist")

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        payment = await facade.record_payment(
            receptionist, reservation_id=reservation.id, amount="50.00", method="card"
        )
        payment_id = payment.id

        with pytest.raises(PermissionDenied):
            await facade.update_payment(receptionist, payment_id=payment_id, amount="40.00")
        with pytest.raises(PermissionDenied):
            await facade.delete_payment(receptionist, payment_id=payment_id)
        with pytest.raises(PermissionDenied):
            await facade.delete_reservation(receptionist, reservation_id=reservation.id)
        with pytest.raises(PermissionDenied):
            await facade.delete_room(receptionist, room_id=ledger_seed["closed_room"].id)

        updated = await facade.update_payment(admin, payment_id=payment_id, amount="40.00")
        assert updated.amount == Money(4000)


async def test_backdating_is_reserved_to_admins(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    with pytest.raises(InvalidDateRange) as excinfo:
        await _create(
            db_url,
            clock,
            ledger_seed,
            actor_key="receptionist",
            start_date=date(2025, 4, 30),
            end_date=date(2025, 5, 2),
        )
    assert excinfo.value.context["today"] == "2025-05-01"

    same_day = await _create(
        db_url,
        clock,
        ledger_seed,
        actor_key="receptionist",
        start_date=date(2025, 5, 1),
        end_date=date(2025, 5, 2),
    )
    assert same_day.created_by_id == ledger_seed["receptionist"].id

    backdated = await _create(
        db_url,
        clock,
        ledger_seed,
        start_date=date(2025, 4, 20),
        end_date=date(2025, 4, 22),
    )
    assert backdated.start_date == date(2025, 4, 20)

    # an update that keeps the past start date is not a backdate
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        extended = await facade.update_reservation(
            ledger_seed["receptionist"],
            reservation_id=backdated.id,
            end_date=date(2025, 4, 23),
        )
    assert extended.end_date == date(2025, 4, 23)


@pytest.mark.parametrize(
    ("start", "end"),
    [
        (date(2025, 6, 5), date(2025, 6, 5)),
        (date(2025, 6, 5), date(2025, 6, 1)),
        (date(2025, 6, 1), date(2026, 6, 2)),
    ],
)
async def test_invalid_stay_lengths(
    ledger_seed: dict[str, Any], db_url: str, clock, start: date, end: date
) -> None:
    with pytest.raises(InvalidDateRange):
        await _create(db_url, clock, ledger_seed, start_date=start, end_date=end)


async def test_longest_allowed_stay(ledger_seed: dict[str, Any], db_url: str, clock) -> None:
    reservation = await _create(
        db_url,
        clock,
        ledger_seed,
        start_date=date(2025, 6, 1),
        end_date=date(2026, 6, 1),
    )
    assert (reservation.end_date - reservation.start_date).days == 365


async def test_out_of_service_and_missing_rooms(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    with pytest.raises(RoomUnavailable) as excinfo:
        await _create(db_url, clock, ledger_seed, room_id=ledger_seed["closed_room"].id)
    assert excinfo.value.context["room_state"] == "out_of_service"

    with pytest.raises(NotFound):
        await _create(db_url, clock, ledger_seed, room_id=uuid.uuid4())
    with pytest.raises(NotFound):
        await _create(db_url, clock, ledger_seed, customer_id=uuid.uuid4())


async def test_audit_events_follow_committed_mutations(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _create(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        line = await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["breakfast"].id,
        )
        await facade.update_service_quantity(
            admin, reservation_id=reservation.id, line_id=line.id, quantity=2
        )
        await facade.record_payment(
            admin, reservation_id=reservation.id, amount="10.00", method="cash"
        )
        with pytest.raises(HasPayments):
            await facade.delete_reservation(admin, reservation_id=reservation.id)

    async with sessionmaker() as session:
        events = (
            await session.execute(select(AuditEvent).order_by(AuditEvent.created_at.asc()))
        ).scalars().all()
    assert [event.event_type for event in events] == [
        "reservation.created",
        "reservation.service_attached",
        "reservation.service_quantity_updated",
        "payment.recorded",
    ]
    assert all(event.user_id == admin.id for event in events)
    assert events[2].payload["old_quantity"] == 1
    assert events[2].payload["new_quantity"] == 2


async def test_injected_audit_sink_receives_events(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    sink = RecordingAuditSink()
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock, audit=sink)
        item = await facade.create_service_item(
            ledger_seed["receptionist"], name="Spa access", price="35.00"
        )
        await facade.update_service_item(
            ledger_seed["receptionist"], item_id=item.id, price="40.00"
        )

    assert [event_type for event_type, _, _ in sink.events] == [
        "service_item.created",
        "service_item.updated",
    ]
    assert sink.events[1][2]["changes"] == {"price": {"old": "35.00", "new": "40.00"}}
