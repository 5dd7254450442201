"""
maint_portal.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Liveness check (`/healthz`).
- Readiness check (`/readyz`) checking the user directory database.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from maint_portal.api.deps import db_session

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Sign-in and every guarded request need the directory.
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}
