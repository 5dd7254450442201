"""
maint_portal.db.base

SQLAlchemy declarative base shared by all portal tables.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
