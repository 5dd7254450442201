from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from maint_portal.api.deps import db_session
from maint_portal.auth.deps import require_roles
from maint_portal.auth.models import Role
from maint_portal.db.repositories.audit import AuditRepo

router = APIRouter(
    prefix="/v1/audit",
    tags=["audit"],
    dependencies=[Depends(require_roles(Role.admin))],
)


class AuditEventResponse(BaseModel):
    id: str
    actor: str
    event_type: str
    subject_id: str | None
    details: dict[str, Any]
    created_at: datetime


@router.get("", response_model=list[AuditEventResponse])
async def list_audit_events(
    event_type: str | None = None,
    limit: int = Query(default=200, ge=1, le=1000),
    session: AsyncSession = Depends(db_session),
) -> list[AuditEventResponse]:
    # Newest first.
    events = await AuditRepo(session).list_recent(event_type=event_type, limit=limit)
    return [
        AuditEventResponse(
            id=str(e.id),
            actor=e.actor,
            event_type=e.event_type,
            subject_id=e.subject_id,
            details=e.details or {},
            created_at=e.created_at,
        )
        for e in events
    ]
