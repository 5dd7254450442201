"""
maint_portal.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert a bearer id token into the caller's uid.
- Resolve the uid against the user directory into a typed `Principal`.
- Enforce roles on data endpoints via reusable dependency factories.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from maint_portal.api.deps import db_session, settings_dep
from maint_portal.auth.jwt import JwtConfig, JwtValidationError, subject_of
from maint_portal.auth.models import Principal, Role
from maint_portal.db.repositories.users import UserRepo
from maint_portal.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def bearer_token(creds: HTTPAuthorizationCredentials | None = Depends(_bearer)) -> str:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    return creds.credentials


def get_token_subject(
    token: str = Depends(bearer_token),
    settings: Settings = Depends(settings_dep),
) -> str:
    try:
        return subject_of(cfg=JwtConfig.from_settings(settings), token=token)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e


async def get_principal(
    uid: str = Depends(get_token_subject),
    session: AsyncSession = Depends(db_session),
) -> Principal:
    # The role always comes from the directory, never from the token.
    user = await UserRepo(session).get(uid)
    if user is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Unknown principal")
    return Principal(id=user.uid, role=user.role)


async def get_optional_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> Principal | None:
    """
    Like `get_principal`, but anonymous or stale callers resolve to None instead of 401.
    Used by section guards, which redirect rather than reject.
    """
    if creds is None or not creds.credentials:
        return None
    try:
        uid = subject_of(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError:
        return None
    user = await UserRepo(session).get(uid)
    return Principal(id=user.uid, role=user.role) if user is not None else None


def require_roles(*allowed: Role):
    allowed_set = frozenset(allowed)

    def _dep(principal: Principal = Depends(get_principal)) -> Principal:
        # Data endpoints let admins through; section guards do not (see auth.guard).
        if principal.is_admin:
            return principal
        if principal.role not in allowed_set:
            raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Insufficient role")
        return principal

    return _dep


# --- Module Notes -----------------------------------------------------------
# `require_roles` accepts *any* of the listed roles: a portal user holds exactly one.
