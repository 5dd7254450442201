"""
tests.test_identity_api

Identity, directory, section and audit endpoints over ASGITransport.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI
from pydantic import ValidationError

from maint_portal.auth.models import Role
from maint_portal.settings import Settings
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, bearer, create_account, sign_in


@pytest.mark.asyncio
async def test_sign_in_error_codes(app: FastAPI, client: httpx.AsyncClient) -> None:
    await create_account(app, email="tech@example.com", role=Role.technician)

    r = await client.post(
        "/v1/auth/sign-in", json={"email": "nobody@example.com", "password": "Passw0rd"}
    )
    assert r.status_code == 401
    assert r.json()["detail"]["code"] == "auth/user-not-found"

    r = await client.post(
        "/v1/auth/sign-in", json={"email": "tech@example.com", "password": "wrong"}
    )
    assert r.status_code == 401
    assert r.json()["detail"] == {"code": "auth/wrong-password", "message": "Invalid password"}

    r = await client.post("/v1/auth/sign-in", json={"email": "", "password": ""})
    assert r.status_code == 401
    assert r.json()["detail"]["code"] == "auth/invalid-credential"


@pytest.mark.asyncio
async def test_sign_in_is_case_insensitive_on_email(
    app: FastAPI, client: httpx.AsyncClient
) -> None:
    uid = await create_account(app, email="Sup@Example.com", role=Role.supervisor)
    r = await client.post(
        "/v1/auth/sign-in", json={"email": "  SUP@example.COM ", "password": "Passw0rd"}
    )
    assert r.status_code == 200
    assert r.json()["uid"] == uid


@pytest.mark.asyncio
async def test_refresh_and_sign_out(app: FastAPI, client: httpx.AsyncClient) -> None:
    uid = await create_account(app, email="inv@example.com", role=Role.inventory_employee)
    token = await sign_in(client, "inv@example.com")

    r = await client.post("/v1/auth/refresh", headers=bearer(token))
    assert r.status_code == 200
    assert r.json()["uid"] == uid

    r = await client.post("/v1/auth/refresh", headers=bearer("not-a-jwt"))
    assert r.status_code == 401
    assert r.json()["detail"]["code"] == "auth/invalid-credential"

    r = await client.post("/v1/auth/sign-out", headers=bearer(token))
    assert r.status_code == 204

    r = await client.post("/v1/auth/sign-out")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_profile_is_visible_to_self_and_admin_only(
    app: FastAPI, client: httpx.AsyncClient
) -> None:
    tech_uid = await create_account(app, email="tech@example.com", role=Role.technician)
    sup_uid = await create_account(app, email="sup@example.com", role=Role.supervisor)
    tech_token = await sign_in(client, "tech@example.com")
    admin_token = await sign_in(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    r = await client.get(f"/v1/users/{tech_uid}/profile", headers=bearer(tech_token))
    assert r.status_code == 200
    assert r.json()["role"] == "technician"
    assert r.json()["email"] == "tech@example.com"

    r = await client.get(f"/v1/users/{sup_uid}/profile", headers=bearer(tech_token))
    assert r.status_code == 404

    r = await client.get(f"/v1/users/{sup_uid}/profile", headers=bearer(admin_token))
    assert r.status_code == 200
    assert r.json()["role"] == "supervisor"

    r = await client.get(f"/v1/users/{tech_uid}/profile")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_admin_creates_and_lists_users(client: httpx.AsyncClient) -> None:
    admin_token = await sign_in(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    payload = {
        "email": "new.tech@example.com",
        "password": "Welcome1",
        "first_name": "Nia",
        "last_name": "Okafor",
        "username": "nia",
        "role": "technician",
    }

    r = await client.post("/v1/users", json=payload, headers=bearer(admin_token))
    assert r.status_code == 201
    created = r.json()
    assert created["role"] == "technician"

    r = await client.post("/v1/users", json=payload, headers=bearer(admin_token))
    assert r.status_code == 409

    weak = {**payload, "email": "weak@example.com", "password": "password"}
    r = await client.post("/v1/users", json=weak, headers=bearer(admin_token))
    assert r.status_code == 422

    r = await client.get("/v1/users", params={"role": "technician"}, headers=bearer(admin_token))
    assert r.status_code == 200
    assert [u["uid"] for u in r.json()] == [created["uid"]]

    # The new account can sign in straight away.
    await sign_in(client, "new.tech@example.com", "Welcome1")


@pytest.mark.asyncio
async def test_user_management_requires_admin(app: FastAPI, client: httpx.AsyncClient) -> None:
    await create_account(app, email="sup@example.com", role=Role.supervisor)
    token = await sign_in(client, "sup@example.com")

    r = await client.get("/v1/users", headers=bearer(token))
    assert r.status_code == 403

    r = await client.post(
        "/v1/users",
        json={
            "email": "x@example.com",
            "password": "Welcome1",
            "first_name": "Xa",
            "last_name": "Yb",
        },
        headers=bearer(token),
    )
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_section_guard_endpoint(app: FastAPI, client: httpx.AsyncClient) -> None:
    await create_account(app, email="tech@example.com", role=Role.technician)
    tech_token = await sign_in(client, "tech@example.com")
    admin_token = await sign_in(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    r = await client.get("/v1/sections/admin", headers=bearer(admin_token))
    assert r.status_code == 200
    body = r.json()
    assert body["landing_path"] == "/admin/dashboard"
    assert {"label": "Users", "href": "/admin/users"} in body["nav_items"]

    r = await client.get("/v1/sections/admin", headers=bearer(tech_token))
    assert r.status_code == 303
    assert r.headers["location"] == "/technician/dashboard"

    r = await client.get("/v1/sections/technician", headers=bearer(admin_token))
    assert r.status_code == 303
    assert r.headers["location"] == "/admin/dashboard"

    r = await client.get("/v1/sections/admin")
    assert r.status_code == 303
    assert r.headers["location"] == "/"

    r = await client.get("/v1/sections/admin", headers=bearer("garbage"))
    assert r.status_code == 303
    assert r.headers["location"] == "/"

    r = await client.get("/v1/sections/warehouse", headers=bearer(admin_token))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_audit_trail_records_identity_events(
    app: FastAPI, client: httpx.AsyncClient
) -> None:
    uid = await create_account(app, email="tech@example.com", role=Role.technician)
    token = await sign_in(client, "tech@example.com")
    await client.post(
        "/v1/auth/sign-in", json={"email": "tech@example.com", "password": "nope"}
    )
    await client.post("/v1/auth/sign-out", headers=bearer(token))

    admin_token = await sign_in(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    r = await client.get(
        "/v1/audit", params={"event_type": "SIGN_IN_FAILED"}, headers=bearer(admin_token)
    )
    assert r.status_code == 200
    failed = r.json()
    assert len(failed) == 1
    assert failed[0]["actor"] == "tech@example.com"
    assert failed[0]["subject_id"] == uid
    assert failed[0]["details"] == {"code": "auth/wrong-password"}

    r = await client.get(
        "/v1/audit", params={"event_type": "SIGNED_OUT"}, headers=bearer(admin_token)
    )
    assert [e["actor"] for e in r.json()] == [uid]

    r = await client.get("/v1/audit", headers=bearer(token))
    assert r.status_code == 403


# 63 characters, 123 bytes: within a character limit of 72, beyond bcrypt's byte limit.
MULTIBYTE_PASSWORD = "Aa1" + "é" * 60


@pytest.mark.asyncio
async def test_passwords_longer_than_bcrypt_accepts_are_rejected(
    app: FastAPI, client: httpx.AsyncClient
) -> None:
    await create_account(app, email="tech@example.com", role=Role.technician)
    admin_token = await sign_in(client, ADMIN_EMAIL, ADMIN_PASSWORD)

    r = await client.post(
        "/v1/users",
        json={
            "email": "long@example.com",
            "password": MULTIBYTE_PASSWORD,
            "first_name": "Lo",
            "last_name": "Ng",
        },
        headers=bearer(admin_token),
    )
    assert r.status_code == 422
    assert "72 bytes" in r.text

    r = await client.post(
        "/v1/auth/sign-in", json={"email": "tech@example.com", "password": MULTIBYTE_PASSWORD}
    )
    assert r.status_code == 422

    # Multi-byte passwords inside the limit still work end to end.
    r = await client.post(
        "/v1/users",
        json={
            "email": "accent@example.com",
            "password": "Aa1" + "é" * 30,
            "first_name": "Ac",
            "last_name": "Ce",
        },
        headers=bearer(admin_token),
    )
    assert r.status_code == 201
    await sign_in(client, "accent@example.com", "Aa1" + "é" * 30)


def test_bootstrap_password_must_fit_bcrypt() -> None:
    with pytest.raises(ValidationError):
        Settings(bootstrap_admin_password=MULTIBYTE_PASSWORD)
