"""Injectable time source."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the system time, always timezone-aware UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def coerce_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def today(clock: Clock) -> date:
    return coerce_utc(clock.now()).date()


__all__ = ["Clock", "SystemClock", "coerce_utc", "today"]
