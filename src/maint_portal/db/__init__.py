"""
maint_portal.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
- Back the user directory, the maintenance task list and the audit trail.
"""

# Package marker.
