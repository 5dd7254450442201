"""
maint_portal.services.tasks

Maintenance task service.

Responsibilities:
- Assign tasks to technicians and notify them by e-mail.
- Scope task listings to the caller's role and select overdue work.
- Update task status for supervisors and the assigned technician.
"""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from maint_portal.auth.models import Principal, Role
from maint_portal.db.models import MaintenanceTask, TaskPriority, TaskStatus
from maint_portal.db.repositories.audit import AuditRepo
from maint_portal.db.repositories.tasks import TaskRepo
from maint_portal.db.repositories.users import UserRepo
from maint_portal.notifications.email import Notifier
from maint_portal.observability.logging import get_logger

log = get_logger(__name__)


class TaskNotFoundError(Exception):
    pass


class TechnicianNotFoundError(Exception):
    pass


class TaskAccessError(Exception):
    pass


class TaskService:
    def __init__(self, *, session: AsyncSession, notifier: Notifier) -> None:
        self._session = session
        self._notifier = notifier
        self._tasks = TaskRepo(session)
        self._users = UserRepo(session)
        self._audit = AuditRepo(session)

    async def assign(
        self,
        *,
        actor: Principal,
        type: str,
        tech_id: str,
        scheduled_date: date,
        priority_level: TaskPriority = TaskPriority.medium,
        status: TaskStatus = TaskStatus.pending,
    ) -> tuple[MaintenanceTask, bool]:
        technician = await self._users.get(tech_id)
        if technician is None or technician.role is not Role.technician:
            raise TechnicianNotFoundError(tech_id)

        tech_name = technician.username or f"{technician.first_name} {technician.last_name}".strip()
        task = await self._tasks.create(
            type=type,
            tech_id=tech_id,
            tech_name=tech_name,
            scheduled_date=scheduled_date,
            priority_level=priority_level,
            status=status,
            created_by=actor.id,
        )
        await self._audit.add(
            actor=actor.id,
            event_type="TASK_ASSIGNED",
            subject_id=str(task.id),
            details={"tech_id": tech_id, "type": type},
        )
        await self._session.commit()
        log.info("task_assigned", task_id=str(task.id), tech_id=tech_id)

        # The task stands even when the e-mail cannot be delivered.
        notified = await self._notifier.send_task_assignment(
            technician_email=technician.email,
            technician_name=tech_name,
            task_type=type,
            scheduled_date=scheduled_date,
            priority_level=priority_level.value,
        )
        return task, notified

    async def list_for(
        self, principal: Principal, *, status: TaskStatus | None = None, overdue: bool = False
    ) -> list[MaintenanceTask]:
        """
        Technicians see their own tasks; every other role sees all of them.

        `overdue` selects pending tasks scheduled before today and overrides `status`.
        """
        scheduled_before = None
        if overdue:
            status, scheduled_before = TaskStatus.pending, date.today()
        tech_id = principal.id if principal.role is Role.technician else None
        return await self._tasks.list_tasks(
            tech_id=tech_id, status=status, scheduled_before=scheduled_before
        )

    async def update_status(
        self, *, actor: Principal, task_id: uuid.UUID, status: TaskStatus
    ) -> MaintenanceTask:
        task = await self._tasks.get(task_id)
        if task is None:
            raise TaskNotFoundError(str(task_id))
        if actor.role not in (Role.admin, Role.supervisor) and task.tech_id != actor.id:
            raise TaskAccessError(str(task_id))

        updated = await self._tasks.set_status(task_id, status)
        if updated is None:
            raise TaskNotFoundError(str(task_id))
        await self._audit.add(
            actor=actor.id,
            event_type="TASK_STATUS_CHANGED",
            subject_id=str(task_id),
            details={"status": status.value},
        )
        await self._session.commit()
        return updated
