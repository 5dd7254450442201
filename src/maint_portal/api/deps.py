"""
maint_portal.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and the notifier.
- Encapsulate app.state access patterns (settings/sessionmaker/notifier).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maint_portal.notifications.email import Mailer, Notifier
from maint_portal.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The settings the app was built with, not the process-wide cached instance.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the lifespan of `maint_portal.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed by the service layer.
    async with session_factory() as session:
        yield session


def notifier_dep(request: Request) -> Notifier:
    return request.app.state.notifier  # type: ignore[attr-defined]


def mailer_dep(request: Request) -> Mailer:
    return request.app.state.mailer  # type: ignore[attr-defined]
