"""
tests.test_session_store

Session store behaviour against in-memory verifier/directory fakes.

Responsibilities:
- login/logout transitions and their failure modes.
- Auth-state stream handling: degrade to signed-out, idempotence, stale lookups.
- Subscription lifecycle.
"""

from __future__ import annotations

import asyncio

import pytest

from maint_portal.auth.models import Principal, Role, Session
from maint_portal.session import (
    DirectoryError,
    Profile,
    ProfileNotFoundError,
    SessionStore,
    SignOutError,
    WrongPasswordError,
)
from maint_portal.session.verifier import AuthStateListener, Unsubscribe


class FakeVerifier:
    def __init__(self, accounts: dict[str, str] | None = None) -> None:
        # email -> uid; every account's password is "secret"
        self.accounts = accounts or {}
        self.current_principal_id: str | None = None
        self.listeners: list[AuthStateListener] = []
        self.sign_out_error: Exception | None = None
        self.sign_out_calls = 0

    async def verify(self, email: str, password: str) -> str:
        if email not in self.accounts or password != "secret":
            raise WrongPasswordError()
        self.current_principal_id = self.accounts[email]
        return self.current_principal_id

    async def sign_out(self) -> None:
        self.sign_out_calls += 1
        self.current_principal_id = None
        if self.sign_out_error is not None:
            raise self.sign_out_error

    def subscribe(self, listener: AuthStateListener) -> Unsubscribe:
        self.listeners.append(listener)
        return lambda: self.listeners.remove(listener)

    async def emit(self, uid: str | None) -> None:
        for listener in list(self.listeners):
            await listener(uid)


class FakeDirectory:
    def __init__(self, roles: dict[str, str] | None = None) -> None:
        self.roles = roles or {}
        self.lookups: list[str] = []
        self.error: Exception | None = None
        self.gates: dict[str, asyncio.Event] = {}

    async def find_profile_by_principal_id(self, principal_id: str) -> Profile | None:
        self.lookups.append(principal_id)
        if principal_id in self.gates:
            await self.gates[principal_id].wait()
        if self.error is not None:
            raise self.error
        role = self.roles.get(principal_id)
        return Profile(uid=principal_id, role=role) if role is not None else None


def _store(verifier: FakeVerifier, directory: FakeDirectory) -> SessionStore:
    return SessionStore(verifier=verifier, directory=directory)


@pytest.mark.asyncio
async def test_store_starts_loading_and_resolves_signed_out() -> None:
    store = _store(FakeVerifier(), FakeDirectory())
    assert store.session == Session.LOADING

    async with store:
        assert store.session == Session.SIGNED_OUT
        assert store.principal is None
        assert not store.loading


@pytest.mark.asyncio
async def test_initialize_resolves_existing_principal() -> None:
    verifier = FakeVerifier()
    verifier.current_principal_id = "u-1"
    store = _store(verifier, FakeDirectory({"u-1": "supervisor"}))

    async with store:
        assert store.principal == Principal(id="u-1", role=Role.supervisor)


@pytest.mark.asyncio
async def test_login_uses_role_from_directory() -> None:
    verifier = FakeVerifier({"tech@example.com": "u-1"})
    directory = FakeDirectory({"u-1": "technician"})

    async with _store(verifier, directory) as store:
        principal = await store.login("tech@example.com", "secret")

        assert principal == Principal(id="u-1", role=Role.technician)
        assert store.session == Session.of(principal)

        # The role is looked up on every login, never cached from an earlier one.
        directory.roles["u-1"] = "supervisor"
        again = await store.login("tech@example.com", "secret")
        assert again.role is Role.supervisor
        assert store.principal.role is Role.supervisor


@pytest.mark.asyncio
async def test_failed_verification_leaves_session_unchanged() -> None:
    async with _store(FakeVerifier(), FakeDirectory()) as store:
        with pytest.raises(WrongPasswordError) as exc_info:
            await store.login("nobody@example.com", "secret")
        assert exc_info.value.code == "auth/wrong-password"
        assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_missing_profile_fails_login_and_leaves_session_unchanged() -> None:
    verifier = FakeVerifier({"ghost@example.com": "u-ghost"})
    async with _store(verifier, FakeDirectory()) as store:
        with pytest.raises(ProfileNotFoundError) as exc_info:
            await store.login("ghost@example.com", "secret")
        assert exc_info.value.principal_id == "u-ghost"
        assert str(exc_info.value) == "User data not found"
        assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_missing_profile_keeps_previous_principal() -> None:
    verifier = FakeVerifier({"a@example.com": "u-a", "ghost@example.com": "u-ghost"})
    async with _store(verifier, FakeDirectory({"u-a": "admin"})) as store:
        principal = await store.login("a@example.com", "secret")
        with pytest.raises(ProfileNotFoundError):
            await store.login("ghost@example.com", "secret")
        assert store.principal == principal


@pytest.mark.asyncio
async def test_unknown_role_tag_is_treated_as_missing_profile() -> None:
    verifier = FakeVerifier({"odd@example.com": "u-odd"})
    async with _store(verifier, FakeDirectory({"u-odd": "manager"})) as store:
        with pytest.raises(ProfileNotFoundError):
            await store.login("odd@example.com", "secret")
        assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_directory_failure_surfaces_from_login() -> None:
    verifier = FakeVerifier({"a@example.com": "u-a"})
    directory = FakeDirectory({"u-a": "admin"})
    directory.error = DirectoryError("directory down")

    async with _store(verifier, directory) as store:
        with pytest.raises(DirectoryError):
            await store.login("a@example.com", "secret")
        assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_logout_clears_session() -> None:
    verifier = FakeVerifier({"a@example.com": "u-a"})
    async with _store(verifier, FakeDirectory({"u-a": "admin"})) as store:
        await store.login("a@example.com", "secret")
        await store.logout()
        assert store.session == Session.SIGNED_OUT
        assert verifier.sign_out_calls == 1


@pytest.mark.asyncio
async def test_logout_clears_session_even_when_sign_out_fails() -> None:
    verifier = FakeVerifier({"a@example.com": "u-a"})
    verifier.sign_out_error = SignOutError("network down")

    async with _store(verifier, FakeDirectory({"u-a": "admin"})) as store:
        await store.login("a@example.com", "secret")
        with pytest.raises(SignOutError):
            await store.logout()
        assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_auth_state_events_update_session() -> None:
    verifier = FakeVerifier()
    async with _store(verifier, FakeDirectory({"u-1": "inventory_employee"})) as store:
        await verifier.emit("u-1")
        assert store.principal == Principal(id="u-1", role=Role.inventory_employee)

        await verifier.emit(None)
        assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_auth_state_degrades_to_signed_out() -> None:
    verifier = FakeVerifier()
    directory = FakeDirectory({"u-1": "admin"})
    async with _store(verifier, directory) as store:
        # No profile record.
        await verifier.emit("u-unknown")
        assert store.session == Session.SIGNED_OUT

        await verifier.emit("u-1")
        assert store.principal is not None

        # Directory failures must not break the subscription.
        directory.error = DirectoryError("timeout")
        await verifier.emit("u-1")
        assert store.session == Session.SIGNED_OUT

        directory.error = None
        await verifier.emit("u-1")
        assert store.principal == Principal(id="u-1", role=Role.admin)


@pytest.mark.asyncio
async def test_repeated_auth_state_is_idempotent() -> None:
    verifier = FakeVerifier()
    async with _store(verifier, FakeDirectory({"u-1": "technician"})) as store:
        seen: list[Session] = []
        store.watch(seen.append)

        await verifier.emit("u-1")
        first = store.session
        await verifier.emit("u-1")

        assert store.session == first
        assert seen == [first]


@pytest.mark.asyncio
async def test_stale_lookup_does_not_override_newer_state() -> None:
    verifier = FakeVerifier()
    directory = FakeDirectory({"u-slow": "supervisor"})
    directory.gates["u-slow"] = asyncio.Event()

    async with _store(verifier, directory) as store:
        pending = asyncio.create_task(verifier.emit("u-slow"))
        await asyncio.sleep(0)
        assert directory.lookups == ["u-slow"]

        # A sign-out arrives while the lookup is still in flight.
        await verifier.emit(None)
        directory.gates["u-slow"].set()
        await pending

        assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_initialize_is_idempotent_and_release_unsubscribes() -> None:
    verifier = FakeVerifier()
    store = _store(verifier, FakeDirectory({"u-1": "admin"}))

    release = await store.initialize()
    assert await store.initialize() is release
    assert len(verifier.listeners) == 1

    release()
    assert verifier.listeners == []

    # Events after release no longer reach the store.
    await verifier.emit("u-1")
    assert store.session == Session.SIGNED_OUT


@pytest.mark.asyncio
async def test_context_exit_releases_subscription() -> None:
    verifier = FakeVerifier()
    async with _store(verifier, FakeDirectory()):
        assert len(verifier.listeners) == 1
    assert verifier.listeners == []


@pytest.mark.asyncio
async def test_unwatch_stops_notifications() -> None:
    verifier = FakeVerifier()
    async with _store(verifier, FakeDirectory({"u-1": "admin"})) as store:
        seen: list[Session] = []
        unwatch = store.watch(seen.append)
        await verifier.emit("u-1")
        unwatch()
        await verifier.emit(None)
        assert len(seen) == 1
