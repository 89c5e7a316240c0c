"""Database session and engine helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hotel_ledger.core.config import get_settings

_engine_cache: dict[str, AsyncEngine] = {}
_sessionmaker_cache: dict[str, async_sessionmaker[AsyncSession]] = {}


def _resolve_database_url(override: str | None = None) -> str:
    return override or get_settings().database_url


def _engine_options(url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": False, "future": True}
    if make_url(url).get_backend_name() == "sqlite":
        # Concurrent bookings wait on the write lock instead of failing fast.
        options["connect_args"] = {"timeout": get_settings().sqlite_busy_timeout}
    return options


def _configure_sqlite_connection(dbapi_connection, _connection_record) -> None:
    # The driver must not issue its own deferred BEGIN; see _begin_immediate.
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(connection) -> None:
    """Take the SQLite write lock when the transaction starts.

    A deferred transaction that reads before it writes can fail with
    "database is locked" instead of waiting for a concurrent writer.
    """
    connection.exec_driver_sql("BEGIN IMMEDIATE")


def get_engine(database_url: str | None = None) -> AsyncEngine:
    url = _resolve_database_url(database_url)
    engine = _engine_cache.get(url)
    if engine is None:
        engine = create_async_engine(url, **_engine_options(url))
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _configure_sqlite_connection)
            event.listen(engine.sync_engine, "begin", _begin_immediate)
        _engine_cache[url] = engine
    return engine


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Return (and cache) an async sessionmaker for the given database URL."""
    url = _resolve_database_url(database_url)
    sessionmaker = _sessionmaker_cache.get(url)
    if sessionmaker is None:
        sessionmaker = async_sessionmaker(
            get_engine(url), expire_on_commit=False, class_=AsyncSession
        )
        _sessionmaker_cache[url] = sessionmaker
    return sessionmaker


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield an async database session using the configured engine."""
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        yield session


async def dispose_engine(database_url: str | None = None) -> None:
    """Dispose the cached engine/sessionmaker for the given database URL."""
    url = _resolve_database_url(database_url)
    engine = _engine_cache.pop(url, None)
    _sessionmaker_cache.pop(url, None)
    if engine is not None:
        await engine.dispose()
