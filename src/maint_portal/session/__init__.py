"""
maint_portal.session

Client-side session and authorization core.

Responsibilities:
- `SessionStore`: who is signed in and with which role.
- Verifier/directory adapters for the Portal API.
- `GuardedSection`: section guards that follow the store.

Typical wiring:

    async with httpx.AsyncClient(base_url=settings.portal_base_url) as http:
        verifier = HttpCredentialVerifier(http)
        directory = HttpRoleDirectory(http, token_provider=lambda: verifier.id_token)
        async with SessionStore(verifier=verifier, directory=directory) as store:
            principal = await store.login(email, password)
            navigate(route_for(principal.role))
"""

from maint_portal.session.directory import HttpRoleDirectory, Profile, RoleDirectory
from maint_portal.session.errors import (
    AuthenticationError,
    DirectoryError,
    InvalidCredentialsError,
    ProfileNotFoundError,
    SessionError,
    SignOutError,
    UserNotFoundError,
    VerifierUnavailableError,
    WrongPasswordError,
)
from maint_portal.session.sections import GuardedSection
from maint_portal.session.store import SessionStore
from maint_portal.session.verifier import CredentialVerifier, HttpCredentialVerifier

__all__ = [
    "AuthenticationError",
    "CredentialVerifier",
    "DirectoryError",
    "GuardedSection",
    "HttpCredentialVerifier",
    "HttpRoleDirectory",
    "InvalidCredentialsError",
    "Profile",
    "ProfileNotFoundError",
    "RoleDirectory",
    "SessionError",
    "SessionStore",
    "SignOutError",
    "UserNotFoundError",
    "VerifierUnavailableError",
    "WrongPasswordError",
]
