"""
tests.conftest

Shared fixtures: an in-process Portal API on a throwaway SQLite file, a recording
mailer, and helpers for seeding accounts and signing in.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from maint_portal.api.app import create_app
from maint_portal.auth.models import Role
from maint_portal.notifications.email import MailerError
from maint_portal.services.identity import IdentityService
from maint_portal.settings import Settings

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "Admin123"
DEFAULT_PASSWORD = "Passw0rd"


@dataclass
class SentMail:
    to: str
    subject: str
    html: str


@dataclass
class RecordingMailer:
    sent: list[SentMail] = field(default_factory=list)
    fail: bool = False

    async def send(self, *, to: str, subject: str, html: str) -> str:
        if self.fail:
            raise MailerError("SMTP relay refused the message")
        self.sent.append(SentMail(to=to, subject=subject, html=html))
        return f"<msg-{len(self.sent)}@test>"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'portal.db'}",
        jwt_secret="test-secret-0123456789abcdef0123456789",
        bcrypt_rounds=4,
        bootstrap_admin_email=ADMIN_EMAIL,
        bootstrap_admin_password=ADMIN_PASSWORD,
    )


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest_asyncio.fixture
async def app(settings: Settings, mailer: RecordingMailer) -> AsyncIterator[FastAPI]:
    app = create_app(settings=settings, mailer=mailer)
    # httpx's ASGITransport does not run the lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def create_account(
    app: FastAPI,
    *,
    email: str,
    role: Role,
    password: str = DEFAULT_PASSWORD,
    username: str = "",
) -> str:
    """Seed an account through the identity service and return its uid."""
    async with app.state.sessionmaker() as session:
        svc = IdentityService(session=session, settings=app.state.settings)
        user = await svc.create_user(
            actor="test",
            email=email,
            password=password,
            role=role,
            username=username,
            first_name="Test",
            last_name="User",
        )
        return user.uid


async def sign_in(client: httpx.AsyncClient, email: str, password: str = DEFAULT_PASSWORD) -> str:
    r = await client.post("/v1/auth/sign-in", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["id_token"]


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
