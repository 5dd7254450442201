"""
maint_portal.auth.routing

Role router: the single lookup table from role to application section.

Responsibilities:
- Map each role to its section root and landing path.
- Resolve which section (and therefore which role) owns a given path.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from maint_portal.auth.models import Role

ROOT_PATH = "/"


@dataclass(frozen=True, slots=True)
class Section:
    name: str
    role: Role
    root: str

    @property
    def landing_path(self) -> str:
        return f"{self.root}/dashboard"

    def owns(self, path: str) -> bool:
        return path == self.root or path.startswith(self.root + "/")


SECTIONS: Mapping[Role, Section] = MappingProxyType(
    {
        Role.admin: Section(name="admin", role=Role.admin, root="/admin"),
        Role.supervisor: Section(name="supervisor", role=Role.supervisor, root="/supervisor"),
        Role.technician: Section(name="technician", role=Role.technician, root="/technician"),
        Role.inventory_employee: Section(
            name="inventory-employee", role=Role.inventory_employee, root="/inventory-employee"
        ),
    }
)

_BY_NAME: Mapping[str, Section] = MappingProxyType({s.name: s for s in SECTIONS.values()})


def section_for(role: Role | str | None) -> Section | None:
    parsed = Role.parse(role)
    if parsed is None:
        return None
    return SECTIONS.get(parsed)


def route_for(role: Role | str | None) -> str:
    """
    Landing path for a role; unknown or absent roles land on the root path.
    """
    section = section_for(role)
    return section.landing_path if section is not None else ROOT_PATH


def section_named(name: str) -> Section | None:
    return _BY_NAME.get(name)


def section_for_path(path: str) -> Section | None:
    for section in SECTIONS.values():
        if section.owns(path):
            return section
    return None


# --- Module Notes -----------------------------------------------------------
# Every role comparison that decides navigation goes through this module; the
# guard and the API section endpoint both import it.
