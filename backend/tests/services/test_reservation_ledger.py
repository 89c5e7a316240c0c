"""Service lines on a reservation and the totals derived from them."""

from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from hotel_ledger.core.errors import AlreadyAttached, InUse, InvalidQuantity, NotFound
from hotel_ledger.core.money import Money
from hotel_ledger.db.session import get_sessionmaker
from hotel_ledger.models import Reservation
from hotel_ledger.services import reservation_ledger_service
from hotel_ledger.services.reconciliation_service import ReconciliationFacade

pytestmark = pytest.mark.asyncio


async def _reservation(db_url: str, clock, seed: dict[str, Any], **overrides) -> Reservation:
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
        return await facade.create_reservation(seed["admin"], **params)


async def test_attach_service_adds_frozen_subtotal_to_total(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _reservation(db_url, clock, ledger_seed)
    assert reservation.total_amount == Money(10000)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        line = await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["breakfast"].id,
            quantity=2,
        )
        assert line.unit_price == Money(2550)
        assert line.subtotal == Money(5100)

        refreshed = await facade.get_reservation(admin, reservation_id=reservation.id)
        assert refreshed.total_amount == Money(15100)
        assert await reservation_ledger_service.total(
            session, reservation=refreshed
        ) == Money(15100)
        assert await reservation_ledger_service.has_service(
            session,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["breakfast"].id,
        )


async def test_catalog_reprice_leaves_attached_lines_alone(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _reservation(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["parking"].id,
            quantity=2,
        )
        await facade.update_service_item(
            admin, item_id=ledger_seed["parking"].id, price="15.00"
        )
        lines = await facade.list_service_lines(admin, reservation_id=reservation.id)
        assert [line.unit_price for line in lines] == [Money(1200)]
        refreshed = await facade.get_reservation(admin, reservation_id=reservation.id)
        assert await reservation_ledger_service.total(
            session, reservation=refreshed
        ) == Money(12400)


async def test_duplicate_attach_and_catalog_delete_rejected(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    breakfast = ledger_seed["breakfast"]
    reservation = await _reservation(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        first = await facade.attach_service(
            admin, reservation_id=reservation.id, service_item_id=breakfast.id
        )
        first_id = first.id
        with pytest.raises(AlreadyAttached) as excinfo:
            await facade.attach_service(
                admin, reservation_id=reservation.id, service_item_id=breakfast.id
            )
        assert excinfo.value.context["line_id"] == str(first_id)

        with pytest.raises(InUse):
            await facade.delete_service_item(admin, item_id=breakfast.id)

        lines = await facade.list_service_lines(admin, reservation_id=reservation.id)
        assert len(lines) == 1
        refreshed = await facade.get_reservation(admin, reservation_id=reservation.id)
        assert refreshed.total_amount == Money(12550)


async def test_quantity_update_and_detach_recompute_total(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _reservation(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        breakfast_line = await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["breakfast"].id,
        )
        parking_line = await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["parking"].id,
            quantity=3,
        )
        updated = await facade.update_service_quantity(
            admin, reservation_id=reservation.id, line_id=breakfast_line.id, quantity=4
        )
        assert updated.quantity == 4

        refreshed = await facade.get_reservation(admin, reservation_id=reservation.id)
        # 100.00 + 4 x 25.50 + 3 x 12.00
        assert refreshed.total_amount == Money(23800)

        await facade.detach_service(
            admin, reservation_id=reservation.id, line_id=parking_line.id
        )
        refreshed = await facade.get_reservation(admin, reservation_id=reservation.id)
        assert refreshed.total_amount == Money(20200)
        assert await reservation_ledger_service.services_total(
            session, reservation_id=reservation.id
        ) == Money(10200)

        with pytest.raises(NotFound):
            await facade.detach_service(
                admin, reservation_id=reservation.id, line_id=parking_line.id
            )


@pytest.mark.parametrize("quantity", [0, -1, True, 1.5, "2"])
async def test_invalid_quantity_rejected(quantity) -> None:
    with pytest.raises(InvalidQuantity):
        reservation_ledger_service.validate_quantity(quantity)


async def test_quantity_update_rejects_invalid_values(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    reservation = await _reservation(db_url, clock, ledger_seed)

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        line = await facade.attach_service(
            admin,
            reservation_id=reservation.id,
            service_item_id=ledger_seed["breakfast"].id,
            quantity=2,
        )
        with pytest.raises(InvalidQuantity):
            await facade.update_service_quantity(
                admin, reservation_id=reservation.id, line_id=line.id, quantity=0
            )
        lines = await facade.list_service_lines(admin, reservation_id=reservation.id)
        assert [item.quantity for item in lines] == [2]


async def test_line_from_another_reservation_is_not_found(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    admin = ledger_seed["admin"]
    first = await _reservation(db_url, clock, ledger_seed)
    second = await _reservation(
        db_url,
        clock,
        ledger_seed,
        start_date=date(2025, 6, 10),
        end_date=date(2025, 6, 12),
    )

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        facade = ReconciliationFacade(session, clock=clock)
        line = await facade.attach_service(
            admin, reservation_id=first.id, service_item_id=ledger_seed["parking"].id
        )
        with pytest.raises(NotFound):
            await facade.update_service_quantity(
                admin, reservation_id=second.id, line_id=line.id, quantity=2
            )


async def test_base_amount_defaults_to_nightly_price(
    ledger_seed: dict[str, Any], db_url: str, clock
) -> None:
    reservation = await _reservation(
        db_url,
        clock,
        ledger_seed,
        room_id=ledger_seed["other_room"].id,
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 4),
        base_amount=None,
    )
    assert reservation.base_amount == Money(54000)
    assert reservation.total_amount == Money(54000)
