"""Test fixtures for the hotel ledger backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from hotel_ledger.api.deps import get_clock
from hotel_ledger.core.config import get_settings
from hotel_ledger.core.money import Money
from hotel_ledger.core.security import get_password_hash
from hotel_ledger.db.base import Base
from hotel_ledger.db.session import dispose_engine, get_sessionmaker
from hotel_ledger.main import app
from hotel_ledger.models import (
    Customer,
    Room,
    RoomState,
    RoomType,
    ServiceItem,
    User,
    UserRole,
)

ADMIN_PASSWORD = "Adm1nPass!"
RECEPTIONIST_PASSWORD = "Fr0ntDesk!"


class FrozenClock:
    """Clock pinned to a fixed instant; tests move it with ``set``."""

    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def set(self, instant: datetime) -> None:
        self.instant = instant


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2025, 5, 1, 12, 0, tzinfo=UTC))


@pytest_asyncio.fixture()
async def ledger_seed(reset_database: None, db_url: str) -> dict[str, Any]:
    """Seed staff users, rooms, a customer and two catalog services.

    Returned ORM objects are detached with their attributes loaded.
    """
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        admin = User(
            email="admin@hotel.test",
            hashed_password=get_password_hash(ADMIN_PASSWORD),
            full_name="Alex Admin",
            role=UserRole.ADMIN,
        )
        receptionist = User(
            email="desk@hotel.test",
            hashed_password=get_password_hash(RECEPTIONIST_PASSWORD),
            full_name="Robin Desk",
            role=UserRole.RECEPTIONIST,
        )
        room = Room(
            number="101",
            room_type=RoomType.STANDARD,
            capacity=2,
            price=Money.from_decimal("100.00"),
        )
        other_room = Room(
            number="102",
            room_type=RoomType.SUITE,
            capacity=4,
            price=Money.from_decimal("180.00"),
        )
        closed_room = Room(
            number="999",
            room_type=RoomType.STANDARD,
            state=RoomState.OUT_OF_SERVICE,
            capacity=2,
            price=Money.from_decimal("90.00"),
        )
        customer = Customer(
            first_name="Camille",
            last_name="Martin",
            phone_number="+33612345678",
        )
        breakfast = ServiceItem(
            name="Breakfast", name_key="breakfast", price=Money.from_decimal("25.50")
        )
        parking = ServiceItem(
            name="Parking", name_key="parking", price=Money.from_decimal("12.00")
        )
        session.add_all(
            [admin, receptionist, room, other_room, closed_room, customer, breakfast, parking]
        )
        await session.commit()

    return {
        "admin": admin,
        "receptionist": receptionist,
        "room": room,
        "other_room": other_room,
        "closed_room": closed_room,
        "customer": customer,
        "breakfast": breakfast,
        "parking": parking,
        "admin_password": ADMIN_PASSWORD,
        "receptionist_password": RECEPTIONIST_PASSWORD,
    }


@pytest_asyncio.fixture()
async def app_context(
    ledger_seed: dict[str, Any], clock: FrozenClock
) -> AsyncIterator[dict[str, Any]]:
    """Yield an async client plus the seeded data, with the clock frozen."""
    app.dependency_overrides[get_clock] = lambda: clock
    context = dict(ledger_seed)
    context["clock"] = clock
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            context["client"] = client
            yield context
    finally:
        app.dependency_overrides.pop(get_clock, None)
