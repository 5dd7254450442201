"""
maint_portal.db.repositories.tasks

Repository for `MaintenanceTask` entities.

Responsibilities:
- Create tasks and update their status.
- List tasks for supervisors (all) and technicians (assigned only).
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from maint_portal.db.models import MaintenanceTask, TaskPriority, TaskStatus


class TaskRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        type: str,
        tech_id: str,
        tech_name: str,
        scheduled_date: date,
        priority_level: TaskPriority,
        status: TaskStatus,
        created_by: str,
    ) -> MaintenanceTask:
        task = MaintenanceTask(
            type=type,
            tech_id=tech_id,
            tech_name=tech_name,
            scheduled_date=scheduled_date,
            priority_level=priority_level,
            status=status,
            created_by=created_by,
        )
        self._session.add(task)
        await self._session.flush()
        return task

    async def get(self, task_id: uuid.UUID) -> MaintenanceTask | None:
        return await self._session.get(MaintenanceTask, task_id)

    async def list_tasks(
        self,
        *,
        tech_id: str | None = None,
        status: TaskStatus | None = None,
        scheduled_before: date | None = None,
    ) -> list[MaintenanceTask]:
        # Soonest first, matching the supervisor and technician task tables.
        stmt = select(MaintenanceTask).order_by(
            MaintenanceTask.scheduled_date, MaintenanceTask.created_at
        )
        if tech_id is not None:
            stmt = stmt.where(MaintenanceTask.tech_id == tech_id)
        if status is not None:
            stmt = stmt.where(MaintenanceTask.status == status)
        if scheduled_before is not None:
            stmt = stmt.where(MaintenanceTask.scheduled_date < scheduled_before)
        return list((await self._session.execute(stmt)).scalars().all())

    async def set_status(self, task_id: uuid.UUID, status: TaskStatus) -> MaintenanceTask | None:
        task = await self._session.get(MaintenanceTask, task_id, with_for_update=True)
        if task is None:
            return None
        task.status = status
        await self._session.flush()
        return task
