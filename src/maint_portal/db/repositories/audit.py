"""
maint_portal.db.repositories.audit

Repository for `AuditEvent` entities.

Responsibilities:
- Append audit events (sign-in attempts, sign-outs, user creation, task changes).
- Query the trail newest-first for the admin audit view.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from maint_portal.db.models import AuditEvent


class AuditRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self,
        *,
        actor: str,
        event_type: str,
        subject_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> AuditEvent:
        # Append-only: there is no update or delete path.
        ev = AuditEvent(
            actor=actor,
            event_type=event_type,
            subject_id=subject_id,
            details=details or {},
        )
        self._session.add(ev)
        await self._session.flush()
        return ev

    async def list_recent(
        self, *, event_type: str | None = None, limit: int = 200
    ) -> list[AuditEvent]:
        stmt = select(AuditEvent).order_by(desc(AuditEvent.created_at)).limit(limit)
        if event_type is not None:
            stmt = stmt.where(AuditEvent.event_type == event_type)
        return list((await self._session.execute(stmt)).scalars().all())


# --- Module Notes -----------------------------------------------------------
# Failed sign-ins are recorded with the submitted e-mail as actor; the password
# is never part of `details`.
