"""
maint_portal.api.routers.tasks

Maintenance task endpoints.

Responsibilities:
- Supervisors assign tasks (the technician is e-mailed).
- Role-scoped task listing, including the overdue view.
- Status updates by supervisors or the assigned technician.
"""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_403_FORBIDDEN, HTTP_404_NOT_FOUND

from maint_portal.api.deps import db_session, notifier_dep
from maint_portal.auth.deps import require_roles
from maint_portal.auth.models import Principal, Role
from maint_portal.db.models import MaintenanceTask, TaskPriority, TaskStatus
from maint_portal.notifications.email import Notifier
from maint_portal.services.tasks import (
    TaskAccessError,
    TaskNotFoundError,
    TaskService,
    TechnicianNotFoundError,
)

router = APIRouter(prefix="/v1/tasks", tags=["tasks"])


class AssignTaskRequest(BaseModel):
    type: str = Field(min_length=1, max_length=128)
    tech_id: str = Field(min_length=1, max_length=36)
    scheduled_date: date
    priority_level: TaskPriority = TaskPriority.medium
    status: TaskStatus = TaskStatus.pending


class StatusUpdateRequest(BaseModel):
    status: TaskStatus


class TaskResponse(BaseModel):
    id: uuid.UUID
    type: str
    tech_id: str
    tech_name: str
    scheduled_date: date
    priority_level: TaskPriority
    status: TaskStatus

    @classmethod
    def of(cls, task: MaintenanceTask) -> TaskResponse:
        return cls(
            id=task.id,
            type=task.type,
            tech_id=task.tech_id,
            tech_name=task.tech_name,
            scheduled_date=task.scheduled_date,
            priority_level=task.priority_level,
            status=task.status,
        )


class AssignTaskResponse(TaskResponse):
    notified: bool


@router.post("", response_model=AssignTaskResponse, status_code=HTTP_201_CREATED)
async def assign_task(
    body: AssignTaskRequest,
    principal: Principal = Depends(require_roles(Role.supervisor)),
    session: AsyncSession = Depends(db_session),
    notifier: Notifier = Depends(notifier_dep),
) -> AssignTaskResponse:
    svc = TaskService(session=session, notifier=notifier)
    try:
        task, notified = await svc.assign(
            actor=principal,
            type=body.type,
            tech_id=body.tech_id,
            scheduled_date=body.scheduled_date,
            priority_level=body.priority_level,
            status=body.status,
        )
    except TechnicianNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Technician not found") from e
    return AssignTaskResponse(**TaskResponse.of(task).model_dump(), notified=notified)


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    status: TaskStatus | None = None,
    overdue: bool = False,
    principal: Principal = Depends(
        require_roles(Role.supervisor, Role.technician, Role.inventory_employee)
    ),
    session: AsyncSession = Depends(db_session),
    notifier: Notifier = Depends(notifier_dep),
) -> list[TaskResponse]:
    svc = TaskService(session=session, notifier=notifier)
    tasks = await svc.list_for(principal, status=status, overdue=overdue)
    return [TaskResponse.of(t) for t in tasks]


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: uuid.UUID,
    body: StatusUpdateRequest,
    principal: Principal = Depends(require_roles(Role.supervisor, Role.technician)),
    session: AsyncSession = Depends(db_session),
    notifier: Notifier = Depends(notifier_dep),
) -> TaskResponse:
    svc = TaskService(session=session, notifier=notifier)
    try:
        task = await svc.update_status(actor=principal, task_id=task_id, status=body.status)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Task not found") from e
    except TaskAccessError as e:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Not assigned to you") from e
    return TaskResponse.of(task)
