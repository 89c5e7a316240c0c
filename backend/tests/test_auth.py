"""Staff authentication, bootstrap admin and log redaction."""

from __future__ import annotations

import logging
from typing import Any

import pytest
from httpx import AsyncClient

from hotel_ledger.core.config import get_settings
from hotel_ledger.core.security import decode_access_token
from hotel_ledger.db.session import get_sessionmaker
from hotel_ledger.models import UserRole
from hotel_ledger.security.logging_filters import SensitiveFilter
from hotel_ledger.security.permissions import Action, can
from hotel_ledger.services import user_service
from hotel_ledger.services.bootstrap_service import ensure_default_admin

pytestmark = pytest.mark.asyncio


async def test_token_carries_user_and_role(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.post(
        "/api/v1/auth/token",
        data={
            "username": "DESK@hotel.test",
            "password": app_context["receptionist_password"],
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    claims = decode_access_token(body["access_token"])
    assert claims["sub"] == str(app_context["receptionist"].id)
    assert claims["role"] == "receptionist"


async def test_invalid_token_rejected(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.get(
        "/api/v1/service-items", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_bootstrap_admin_created_once(
    ledger_seed: dict[str, Any], db_url: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("BOOTSTRAP_ADMIN_EMAIL", "Owner@Hotel.test")
    monkeypatch.setenv("BOOTSTRAP_ADMIN_PASSWORD", "0wnerPass!")
    get_settings.cache_clear()
    try:
        await ensure_default_admin()
        await ensure_default_admin()
    finally:
        monkeypatch.delenv("BOOTSTRAP_ADMIN_EMAIL")
        monkeypatch.delenv("BOOTSTRAP_ADMIN_PASSWORD")
        get_settings.cache_clear()

    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        owner = await user_service.get_user_by_email(session, "owner@hotel.test")
        users = await user_service.list_users(session)
    assert owner is not None
    assert owner.role == UserRole.ADMIN
    assert len(users) == 3


async def test_permissions_by_role(ledger_seed: dict[str, Any]) -> None:
    admin = ledger_seed["admin"]
    receptionist = ledger_seed["receptionist"]
    assert all(can(admin, action) for action in Action)
    assert can(receptionist, Action.PAYMENT_RECORD)
    assert not can(receptionist, Action.PAYMENT_UPDATE)
    assert not can(receptionist, Action.RESERVATION_BACKDATE)
    assert not can(None, Action.RESERVATION_READ)


async def test_sensitive_filter_redacts_credentials() -> None:
    record = logging.LogRecord(
        "uvicorn.access",
        logging.INFO,
        __file__,
        1,
        'POST /auth/token {"password": "hunter2"} Authorization: Bearer abc.def.ghi',
        None,
        None,
    )
    assert SensitiveFilter().filter(record) is True
    assert "hunter2" not in record.msg
    assert "abc.def.ghi" not in record.msg
    assert "**REDACTED**" in record.msg
