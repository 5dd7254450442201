"""
maint_portal.db.models

Persistence schema for the portal.

Responsibilities:
- UserAccount: credentials plus the directory profile (role, names).
- MaintenanceTask: work assigned by supervisors to technicians.
- AuditEvent: append-only trail of sign-ins, sign-outs, user and task changes.
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import JSON, Enum, ForeignKey, Index, String, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from maint_portal.auth.models import Role
from maint_portal.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC).replace(tzinfo=None)


def _new_uid() -> str:
    return str(uuid.uuid4())


class TaskPriority(enum.StrEnum):
    low = "Low"
    medium = "Medium"
    high = "High"


class TaskStatus(enum.StrEnum):
    pending = "pending"
    completed = "completed"


class UserAccount(Base):
    __tablename__ = "users"

    # uid is the opaque principal id handed out by the identity endpoints.
    uid: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_uid)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    username: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    first_name: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, values_callable=lambda e: [m.value for m in e]), nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    tasks: Mapped[list[MaintenanceTask]] = relationship(back_populates="technician")


class MaintenanceTask(Base):
    __tablename__ = "maintenance_tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    type: Mapped[str] = mapped_column(String(128), nullable=False)
    tech_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.uid"), nullable=False, index=True
    )
    # Denormalised display name, as captured when the task was assigned.
    tech_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    scheduled_date: Mapped[date] = mapped_column(nullable=False)
    priority_level: Mapped[TaskPriority] = mapped_column(
        Enum(TaskPriority, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TaskPriority.medium,
    )
    status: Mapped[TaskStatus] = mapped_column(
        Enum(TaskStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=TaskStatus.pending,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(String(36), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    technician: Mapped[UserAccount] = relationship(back_populates="tasks")

    __table_args__ = (Index("ix_tasks_tech_scheduled", "tech_id", "scheduled_date"),)


class AuditEvent(Base):
    __tablename__ = "audit_events"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    actor: Mapped[str] = mapped_column(String(320), nullable=False)  # uid, e-mail or "system"
    event_type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    subject_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)


# --- Module Notes -----------------------------------------------------------
# Enum columns store the enum values ("inventory_employee", "High", ...) so the
# rows read the same as the JSON the API returns.
