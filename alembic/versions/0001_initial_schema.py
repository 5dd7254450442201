"""initial schema: users, maintenance tasks, audit events

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_ROLES = ("admin", "supervisor", "technician", "inventory_employee")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("uid", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("username", sa.String(128), nullable=False),
        sa.Column("first_name", sa.String(64), nullable=False),
        sa.Column("last_name", sa.String(64), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("role", sa.Enum(*_ROLES, name="role"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])

    op.create_table(
        "maintenance_tasks",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("type", sa.String(128), nullable=False),
        sa.Column("tech_id", sa.String(36), sa.ForeignKey("users.uid"), nullable=False),
        sa.Column("tech_name", sa.String(128), nullable=False),
        sa.Column("scheduled_date", sa.Date(), nullable=False),
        sa.Column(
            "priority_level", sa.Enum("Low", "Medium", "High", name="taskpriority"), nullable=False
        ),
        sa.Column(
            "status", sa.Enum("pending", "completed", name="taskstatus"), nullable=False
        ),
        sa.Column("created_by", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_maintenance_tasks_tech_id", "maintenance_tasks", ["tech_id"])
    op.create_index("ix_maintenance_tasks_status", "maintenance_tasks", ["status"])
    op.create_index("ix_tasks_tech_scheduled", "maintenance_tasks", ["tech_id", "scheduled_date"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor", sa.String(320), nullable=False),
        sa.Column("event_type", sa.String(64), nullable=False),
        sa.Column("subject_id", sa.String(64), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_events_event_type", "audit_events", ["event_type"])
    op.create_index("ix_audit_events_subject_id", "audit_events", ["subject_id"])
    op.create_index("ix_audit_events_created_at", "audit_events", ["created_at"])


def downgrade() -> None:
    op.drop_table("audit_events")
    op.drop_table("maintenance_tasks")
    op.drop_table("users")
    sa.Enum(name="taskstatus").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="taskpriority").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="role").drop(op.get_bind(), checkfirst=True)
