"""
maint_portal.session.sections

Section guards bound to a live session store.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from maint_portal.auth.guard import GuardDecision, GuardState, SectionGuard
from maint_portal.auth.models import Session
from maint_portal.session.store import SessionStore

T = TypeVar("T")

Navigate = Callable[[str], None]


class GuardedSection:
    """
    Re-evaluates its guard on every session change and calls `navigate` once per
    transition into Unauthorized, so signing out from inside a section leaves it.

        with GuardedSection(store, SectionGuard(Role.admin), navigate=router.push) as admin:
            page = admin.render(build_page, loading_screen)
    """

    def __init__(
        self, store: SessionStore, guard: SectionGuard, *, navigate: Navigate | None = None
    ) -> None:
        self._store = store
        self._guard = guard
        self._navigate = navigate
        self._decision = guard.evaluate(store.session)
        self._unwatch: Callable[[], None] | None = None

    @classmethod
    def for_path(
        cls, store: SessionStore, path: str, *, navigate: Navigate | None = None
    ) -> GuardedSection | None:
        guard = SectionGuard.for_path(path)
        return cls(store, guard, navigate=navigate) if guard is not None else None

    @property
    def decision(self) -> GuardDecision:
        return self._decision

    def open(self) -> GuardedSection:
        if self._unwatch is None:
            self._unwatch = self._store.watch(self._on_session)
            self._apply(self._guard.evaluate(self._store.session), initial=True)
        return self

    def close(self) -> None:
        if self._unwatch is not None:
            self._unwatch()
            self._unwatch = None

    def __enter__(self) -> GuardedSection:
        return self.open()

    def __exit__(self, *exc: object) -> None:
        self.close()

    def render(self, children: Callable[[], T], placeholder: Callable[[], T]) -> T | None:
        """
        Children when authorized, the placeholder while loading, nothing otherwise.
        """
        if self._decision.state is GuardState.loading:
            return placeholder()
        if self._decision.renders_children:
            return children()
        return None

    def _on_session(self, session: Session) -> None:
        self._apply(self._guard.evaluate(session))

    def _apply(self, decision: GuardDecision, *, initial: bool = False) -> None:
        changed = decision != self._decision
        self._decision = decision
        if (changed or initial) and decision.state is GuardState.unauthorized:
            if self._navigate is not None and decision.redirect_to is not None:
                self._navigate(decision.redirect_to)
