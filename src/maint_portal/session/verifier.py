"""
maint_portal.session.verifier

Credential verifier boundary used by the session store.

Responsibilities:
- Define the `CredentialVerifier` protocol (verify / sign out / auth-state stream).
- Implement it against the Portal API identity endpoints over httpx.
- Hold the current id token and notify subscribers on restore, refresh and sign-out.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

import httpx

from maint_portal.observability.logging import get_logger
from maint_portal.session.errors import (
    AUTH_ERRORS_BY_CODE,
    AuthenticationError,
    InvalidCredentialsError,
    SignOutError,
    VerifierUnavailableError,
)

log = get_logger(__name__)

AuthStateListener = Callable[[str | None], Awaitable[None]]
Unsubscribe = Callable[[], None]


class CredentialVerifier(Protocol):
    @property
    def current_principal_id(self) -> str | None: ...

    async def verify(self, email: str, password: str) -> str: ...

    async def sign_out(self) -> None: ...

    def subscribe(self, listener: AuthStateListener) -> Unsubscribe: ...


class HttpCredentialVerifier:
    """
    Talks to `/v1/auth/*` on the Portal API.

    `verify` does not notify subscribers: the explicit login path owns that
    transition. Restores, refreshes and sign-outs do, since they happen outside any
    login/logout call.
    """

    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http
        self._uid: str | None = None
        self._token: str | None = None
        self._listeners: list[AuthStateListener] = []

    @property
    def current_principal_id(self) -> str | None:
        return self._uid

    @property
    def id_token(self) -> str | None:
        return self._token

    def subscribe(self, listener: AuthStateListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _emit(self, uid: str | None) -> None:
        for listener in list(self._listeners):
            await listener(uid)

    def _headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    async def verify(self, email: str, password: str) -> str:
        try:
            r = await self._http.post(
                "/v1/auth/sign-in", json={"email": email, "password": password}
            )
        except httpx.HTTPError as e:
            raise VerifierUnavailableError() from e

        if r.status_code in (401, 422):
            raise _auth_error(r)
        if r.is_error:
            raise VerifierUnavailableError(f"Sign-in failed with HTTP {r.status_code}")

        self._uid, self._token = _issued(r)
        log.info("credentials_verified", uid=self._uid)
        return self._uid

    async def restore(self, id_token: str) -> str | None:
        """
        Resume a persisted session: validate the token and announce the principal.
        """
        self._token = id_token
        await self.refresh()
        return self._uid

    async def refresh(self) -> None:
        if self._token is None:
            return
        try:
            r = await self._http.post("/v1/auth/refresh", headers=self._headers(self._token))
        except httpx.HTTPError as e:
            raise VerifierUnavailableError() from e

        if r.status_code == 401:
            # Token expired or the account is gone: this is an external sign-out.
            log.info("token_rejected", uid=self._uid)
            self._uid, self._token = None, None
            await self._emit(None)
            return
        if r.is_error:
            raise VerifierUnavailableError(f"Token refresh failed with HTTP {r.status_code}")

        self._uid, self._token = _issued(r)
        await self._emit(self._uid)

    async def sign_out(self) -> None:
        token = self._token
        try:
            if token is not None:
                r = await self._http.post("/v1/auth/sign-out", headers=self._headers(token))
                r.raise_for_status()
        except httpx.HTTPError as e:
            raise SignOutError(f"Sign-out was not acknowledged: {e}") from e
        finally:
            # The local credential is dropped whether or not the server acknowledged.
            self._uid, self._token = None, None
            await self._emit(None)


def _issued(r: httpx.Response) -> tuple[str, str]:
    try:
        body = r.json()
        return str(body["uid"]), str(body["id_token"])
    except (ValueError, KeyError, TypeError) as e:
        raise VerifierUnavailableError(f"Malformed token response: {e!r}") from e


def _auth_error(r: httpx.Response) -> AuthenticationError:
    detail: Any = None
    try:
        body = r.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail")
    if isinstance(detail, dict):
        cls = AUTH_ERRORS_BY_CODE.get(str(detail.get("code")), InvalidCredentialsError)
        return cls(detail.get("message"))
    return InvalidCredentialsError()


# --- Module Notes -----------------------------------------------------------
# The verifier is per client process, like the browser SDK it replaces: one
# signed-in principal at a time.
