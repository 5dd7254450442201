"""
maint_portal.session.errors

Errors surfaced by the session store's `login`/`logout`.
"""

from __future__ import annotations


class SessionError(Exception):
    pass


class AuthenticationError(SessionError):
    """Credentials were rejected, or the verifier could not be reached."""

    code = "auth/invalid-credential"
    default_message = "Invalid email or password"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidCredentialsError(AuthenticationError):
    pass


class UserNotFoundError(AuthenticationError):
    code = "auth/user-not-found"
    default_message = "No account found with this email"


class WrongPasswordError(AuthenticationError):
    code = "auth/wrong-password"
    default_message = "Invalid password"


class VerifierUnavailableError(AuthenticationError):
    code = "auth/network-request-failed"
    default_message = "Sign-in service is unavailable"


class ProfileNotFoundError(SessionError):
    """The principal was verified but has no usable profile in the directory."""

    def __init__(self, principal_id: str, message: str = "User data not found") -> None:
        super().__init__(message)
        self.principal_id = principal_id


class DirectoryError(SessionError):
    """The role directory could not be reached or answered with a server error."""


class SignOutError(SessionError):
    pass


AUTH_ERRORS_BY_CODE: dict[str, type[AuthenticationError]] = {
    cls.code: cls for cls in (InvalidCredentialsError, UserNotFoundError, WrongPasswordError)
}
