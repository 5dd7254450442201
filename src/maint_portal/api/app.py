"""
maint_portal.api.app

FastAPI app factory for the Portal service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine, sessionmaker, mailer).
- Seed the bootstrap admin account so a fresh deployment can sign in.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from maint_portal import __version__
from maint_portal.api.routers.audit import router as audit_router
from maint_portal.api.routers.health import router as health_router
from maint_portal.api.routers.identity import router as identity_router
from maint_portal.api.routers.notifications import router as notifications_router
from maint_portal.api.routers.sections import router as sections_router
from maint_portal.api.routers.tasks import router as tasks_router
from maint_portal.api.routers.users import router as users_router
from maint_portal.db.init_db import init_db
from maint_portal.db.session import create_engine, create_sessionmaker, session_scope
from maint_portal.notifications.email import Mailer, Notifier, SmtpMailer
from maint_portal.observability.logging import configure_logging, get_logger
from maint_portal.observability.middleware import RequestContextMiddleware
from maint_portal.services.identity import IdentityService
from maint_portal.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings, mailer: Mailer | None = None) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            await init_db(engine)

        async with session_scope(app.state.sessionmaker) as session:
            identity = IdentityService(session=session, settings=settings)
            admin = await identity.ensure_bootstrap_admin()
            if admin is not None:
                log.info("bootstrap_admin_ready", uid=admin.uid)

        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Maintenance Portal",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mailer = mailer or SmtpMailer(settings)
    app.state.notifier = Notifier(app.state.mailer)

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(identity_router)
    app.include_router(users_router)
    app.include_router(sections_router)
    app.include_router(tasks_router)
    app.include_router(notifications_router)
    app.include_router(audit_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Tests inject a recording mailer through `create_app(mailer=...)` and enter the
# lifespan explicitly (httpx's ASGITransport does not run it).
