"""
maint_portal.auth.models

Auth domain models.

Responsibilities:
- Define the role tags recognised by the portal.
- Define the authenticated identity (`Principal`) and the client `Session` value.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar


class Role(enum.StrEnum):
    # Values are persisted in the users table and returned by the directory.
    admin = "admin"
    supervisor = "supervisor"
    technician = "technician"
    inventory_employee = "inventory_employee"

    @classmethod
    def parse(cls, value: object) -> Role | None:
        """Return the matching role, or None for absent/unknown tags."""
        if isinstance(value, Role):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated identity: opaque principal id plus the role found in the directory.
    """

    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin


@dataclass(frozen=True, slots=True)
class Session:
    """
    Client-side session value. While `loading` is true, `principal` is not trusted.
    """

    principal: Principal | None = None
    loading: bool = True

    LOADING: ClassVar[Session]
    SIGNED_OUT: ClassVar[Session]

    @classmethod
    def of(cls, principal: Principal) -> Session:
        return cls(principal=principal, loading=False)

    @property
    def is_authenticated(self) -> bool:
        return not self.loading and self.principal is not None


Session.LOADING = Session(principal=None, loading=True)
Session.SIGNED_OUT = Session(principal=None, loading=False)


# --- Module Notes -----------------------------------------------------------
# Sessions are immutable values; the store replaces them wholesale so observers
# can compare old and new with `==`.
