"""
maint_portal.session.store

Session store: the client process's single authority on who is signed in.

Responsibilities:
- Track the current `Session` (principal + loading flag) and notify watchers.
- Follow the verifier's auth-state stream, resolving roles through the directory.
- Provide explicit `login` / `logout`.
"""

from __future__ import annotations

from collections.abc import Callable

from maint_portal.auth.models import Principal, Role, Session
from maint_portal.observability.logging import get_logger
from maint_portal.session.directory import RoleDirectory
from maint_portal.session.errors import DirectoryError, ProfileNotFoundError
from maint_portal.session.verifier import CredentialVerifier, Unsubscribe

log = get_logger(__name__)

SessionListener = Callable[[Session], None]


class SessionStore:
    """
    Starts in the loading state. `initialize()` (or `async with store:`) subscribes to
    the verifier and resolves the initial state; leaving the context releases the
    subscription.

    Only `initialize`'s callback, `login` and `logout` change the session.
    """

    def __init__(self, *, verifier: CredentialVerifier, directory: RoleDirectory) -> None:
        self._verifier = verifier
        self._directory = directory
        self._session = Session.LOADING
        self._watchers: list[SessionListener] = []
        self._unsubscribe: Unsubscribe | None = None
        # Bumped by every transition; an auth-state lookup that finishes after a newer
        # transition is discarded.
        self._epoch = 0

    @property
    def session(self) -> Session:
        return self._session

    @property
    def principal(self) -> Principal | None:
        return self._session.principal

    @property
    def loading(self) -> bool:
        return self._session.loading

    def watch(self, listener: SessionListener) -> Callable[[], None]:
        self._watchers.append(listener)

        def unwatch() -> None:
            if listener in self._watchers:
                self._watchers.remove(listener)

        return unwatch

    async def initialize(self) -> Unsubscribe:
        if self._unsubscribe is not None:
            return self._unsubscribe

        unsubscribe = self._verifier.subscribe(self._on_auth_state_changed)

        def release() -> None:
            if self._unsubscribe is release:
                self._unsubscribe = None
            unsubscribe()

        self._unsubscribe = release
        await self._on_auth_state_changed(self._verifier.current_principal_id)
        return release

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()

    async def __aenter__(self) -> SessionStore:
        await self.initialize()
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _on_auth_state_changed(self, principal_id: str | None) -> None:
        self._epoch += 1
        epoch = self._epoch
        if principal_id is None:
            self._set(Session.SIGNED_OUT)
            return

        try:
            principal = await self._resolve(principal_id)
        except (ProfileNotFoundError, DirectoryError) as e:
            # Degrade to signed-out; the subscription itself must keep running.
            log.warning("auth_state_unresolved", principal_id=principal_id, error=str(e))
            principal = None

        if epoch != self._epoch:
            return
        self._set(Session.of(principal) if principal is not None else Session.SIGNED_OUT)

    async def _resolve(self, principal_id: str) -> Principal:
        profile = await self._directory.find_profile_by_principal_id(principal_id)
        if profile is None:
            raise ProfileNotFoundError(principal_id)
        role = Role.parse(profile.role)
        if role is None:
            raise ProfileNotFoundError(principal_id, "User role not found. Please contact support.")
        return Principal(id=principal_id, role=role)

    async def login(self, email: str, password: str) -> Principal:
        """
        Verify credentials and resolve the role. Errors propagate and leave the session
        as it was.
        """
        principal_id = await self._verifier.verify(email, password)
        principal = await self._resolve(principal_id)
        self._epoch += 1
        self._set(Session.of(principal))
        log.info("login_succeeded", principal_id=principal.id, role=principal.role.value)
        return principal

    async def logout(self) -> None:
        try:
            await self._verifier.sign_out()
        finally:
            self._epoch += 1
            self._set(Session.SIGNED_OUT)
            log.info("logged_out")

    def _set(self, session: Session) -> None:
        if session == self._session:
            return
        self._session = session
        for listener in list(self._watchers):
            listener(session)


# --- Module Notes -----------------------------------------------------------
# Concurrent `login` calls are not serialised here; UIs disable the submit control
# while one is outstanding.
