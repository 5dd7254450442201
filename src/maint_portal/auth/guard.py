"""
maint_portal.auth.guard

Section guard: gate a section's content on the current session.

Responsibilities:
- Evaluate the three-state guard (Loading / Unauthorized / Authorized).
- Choose the redirect target for unauthorized sessions.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from maint_portal.auth.models import Role, Session
from maint_portal.auth.routing import ROOT_PATH, Section, route_for, section_for_path


class GuardState(enum.StrEnum):
    loading = "LOADING"
    unauthorized = "UNAUTHORIZED"
    authorized = "AUTHORIZED"


@dataclass(frozen=True, slots=True)
class GuardDecision:
    state: GuardState
    redirect_to: str | None = None

    @property
    def renders_children(self) -> bool:
        return self.state is GuardState.authorized


LOADING = GuardDecision(GuardState.loading)
AUTHORIZED = GuardDecision(GuardState.authorized)


class SectionGuard:
    """
    Guard for one top-level section.

    Unauthorized sessions are redirected, never rejected: an anonymous session goes
    to the root path and a principal holding another role goes to its own landing
    path.
    """

    def __init__(self, required_role: Role) -> None:
        self.required_role = required_role

    @classmethod
    def for_section(cls, section: Section) -> SectionGuard:
        return cls(section.role)

    @classmethod
    def for_path(cls, path: str) -> SectionGuard | None:
        section = section_for_path(path)
        return cls.for_section(section) if section is not None else None

    def evaluate(self, session: Session) -> GuardDecision:
        if session.loading:
            return LOADING
        principal = session.principal
        if principal is None:
            return GuardDecision(GuardState.unauthorized, redirect_to=ROOT_PATH)
        if principal.role is not self.required_role:
            return GuardDecision(GuardState.unauthorized, redirect_to=route_for(principal.role))
        return AUTHORIZED

    def __repr__(self) -> str:
        return f"SectionGuard(required_role={self.required_role.value!r})"
