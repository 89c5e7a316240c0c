"""Staff user management API tests."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


async def test_current_user_profile(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, app_context["receptionist"].email, app_context["receptionist_password"]
    )
    response = await client.get(
        "/api/v1/users/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["id"] == str(app_context["receptionist"].id)
    assert body["email"] == "desk@hotel.test"
    assert body["role"] == "receptionist"
    assert "hashed_password" not in body

    anonymous = await client.get("/api/v1/users/me")
    assert anonymous.status_code == 401


async def test_user_management_is_admin_only(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, app_context["receptionist"].email, app_context["receptionist_password"]
    )
    headers = {"Authorization": f"Bearer {token}"}

    assert (await client.get("/api/v1/users", headers=headers)).status_code == 403
    create_resp = await client.post(
        "/api/v1/users",
        json={"email": "night@hotel.test", "full_name": "Sam Night", "password": "N1ghtShift!"},
        headers=headers,
    )
    assert create_resp.status_code == 403
    delete_resp = await client.delete(
        f"/api/v1/users/{app_context['admin'].id}", headers=headers
    )
    assert delete_resp.status_code == 403


async def test_create_and_update_users(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, app_context["admin"].email, app_context["admin_password"]
    )
    headers = {"Authorization": f"Bearer {token}"}

    create_resp = await client.post(
        "/api/v1/users",
        json={
            "email": "Night@Hotel.test",
            "full_name": "  Sam   <b>Night</b> ",
            "password": "N1ghtShift!",
        },
        headers=headers,
    )
    assert create_resp.status_code == 201
    night = create_resp.json()
    assert night["email"] == "night@hotel.test"
    assert night["full_name"] == "Sam Night"
    assert night["role"] == "receptionist"
    assert night["is_active"] is True

    login_token = await _authenticate(client, "night@hotel.test", "N1ghtShift!")
    assert login_token

    duplicate = await client.post(
        "/api/v1/users",
        json={"email": "NIGHT@hotel.test", "full_name": "Sam Again", "password": "N1ghtShift!"},
        headers=headers,
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["kind"] == "duplicate_name"
    assert duplicate.json()["context"]["existing_id"] == night["id"]

    for weak in ("short1", "onlyletters", "1234567890", "Password123!"):
        weak_resp = await client.post(
            "/api/v1/users",
            json={"email": "weak@hotel.test", "full_name": "Weak Pass", "password": weak},
            headers=headers,
        )
        assert weak_resp.status_code == 400
        assert weak_resp.json()["context"]["field"] == "password"

    bad_email = await client.post(
        "/api/v1/users",
        json={"email": "not-an-email", "full_name": "No Mail", "password": "N1ghtShift!"},
        headers=headers,
    )
    assert bad_email.status_code == 422

    bad_name = await client.post(
        "/api/v1/users",
        json={
            "email": "script@hotel.test",
            "full_name": "x onerror=alert(1)",
            "password": "N1ghtShift!",
        },
        headers=headers,
    )
    assert bad_name.status_code == 400
    assert bad_name.json()["kind"] == "invalid_name"

    listing = await client.get("/api/v1/users", headers=headers)
    assert listing.status_code == 200
    assert len(listing.json()) == 3

    promote = await client.patch(
        f"/api/v1/users/{night['id']}",
        json={"role": "admin", "full_name": "Samira Night"},
        headers=headers,
    )
    assert promote.status_code == 200
    assert promote.json()["role"] == "admin"
    assert promote.json()["full_name"] == "Samira Night"

    taken = await client.patch(
        f"/api/v1/users/{night['id']}",
        json={"email": "desk@hotel.test"},
        headers=headers,
    )
    assert taken.status_code == 409

    deactivate = await client.patch(
        f"/api/v1/users/{night['id']}", json={"is_active": False}, headers=headers
    )
    assert deactivate.status_code == 200
    login_resp = await client.post(
        "/api/v1/auth/token",
        data={"username": "night@hotel.test", "password": "N1ghtShift!"},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert login_resp.status_code == 401

    admin_id = app_context["admin"].id
    own_role = await client.patch(
        f"/api/v1/users/{admin_id}", json={"role": "receptionist"}, headers=headers
    )
    assert own_role.status_code == 422
    own_deactivation = await client.patch(
        f"/api/v1/users/{admin_id}", json={"is_active": False}, headers=headers
    )
    assert own_deactivation.status_code == 422

    password_change = await client.patch(
        f"/api/v1/users/{admin_id}", json={"password": "N3wAdminPass!"}, headers=headers
    )
    assert password_change.status_code == 200
    assert await _authenticate(client, "admin@hotel.test", "N3wAdminPass!")

    missing = await client.get(
        "/api/v1/users/00000000-0000-0000-0000-000000000000", headers=headers
    )
    assert missing.status_code == 404


async def test_delete_user_guards(app_context: dict[str, Any]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    admin_token = await _authenticate(
        client, app_context["admin"].email, app_context["admin_password"]
    )
    desk_token = await _authenticate(
        client, app_context["receptionist"].email, app_context["receptionist_password"]
    )
    headers = {"Authorization": f"Bearer {admin_token}"}

    booking = await client.post(
        "/api/v1/reservations",
        json={
            "room_id": str(app_context["room"].id),
            "customer_id": str(app_context["customer"].id),
            "start_date": "2025-06-01",
            "end_date": "2025-06-03",
        },
        headers={"Authorization": f"Bearer {desk_token}"},
    )
    assert booking.status_code == 201

    own = await client.delete(f"/api/v1/users/{app_context['admin'].id}", headers=headers)
    assert own.status_code == 422

    booked = await client.delete(
        f"/api/v1/users/{app_context['receptionist'].id}", headers=headers
    )
    assert booked.status_code == 422
    assert booked.json()["kind"] == "in_use"
    assert booked.json()["context"]["reservations"] == 1

    create_resp = await client.post(
        "/api/v1/users",
        json={"email": "temp@hotel.test", "full_name": "Temp Clerk", "password": "T3mpClerk!"},
        headers=headers,
    )
    assert create_resp.status_code == 201
    temp_id = create_resp.json()["id"]

    delete_resp = await client.delete(f"/api/v1/users/{temp_id}", headers=headers)
    assert delete_resp.status_code == 204
    assert (await client.get(f"/api/v1/users/{temp_id}", headers=headers)).status_code == 404
    gone = await client.delete(f"/api/v1/users/{temp_id}", headers=headers)
    assert gone.status_code == 404
