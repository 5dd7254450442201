"""
maint_portal.session.directory

Role directory boundary: principal id -> profile record with a role tag.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import httpx

from maint_portal.session.errors import DirectoryError


@dataclass(frozen=True, slots=True)
class Profile:
    uid: str
    # Raw tag as stored; the session store decides whether it is a known role.
    role: str
    email: str = ""
    username: str = ""


class RoleDirectory(Protocol):
    async def find_profile_by_principal_id(self, principal_id: str) -> Profile | None: ...


class HttpRoleDirectory:
    def __init__(
        self, http: httpx.AsyncClient, *, token_provider: Callable[[], str | None]
    ) -> None:
        self._http = http
        self._token_provider = token_provider

    async def find_profile_by_principal_id(self, principal_id: str) -> Profile | None:
        token = self._token_provider()
        if token is None:
            raise DirectoryError("No id token available for the directory lookup")
        try:
            r = await self._http.get(
                f"/v1/users/{principal_id}/profile",
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as e:
            raise DirectoryError(f"Directory unreachable: {e}") from e

        if r.status_code == 404:
            return None
        if r.is_error:
            raise DirectoryError(f"Directory lookup failed with HTTP {r.status_code}")

        try:
            body = r.json()
            return Profile(
                uid=str(body["uid"]),
                role=str(body.get("role") or ""),
                email=str(body.get("email") or ""),
                username=str(body.get("username") or ""),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise DirectoryError(f"Directory returned a malformed profile: {e!r}") from e
