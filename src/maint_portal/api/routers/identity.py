"""
maint_portal.api.routers.identity

Identity endpoints consumed by session clients as their credential verifier.

Responsibilities:
- Sign in with e-mail/password and return an id token.
- Refresh an id token (token events on the client's auth-state stream).
- Record sign-outs.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_204_NO_CONTENT, HTTP_401_UNAUTHORIZED

from maint_portal.api.deps import db_session, settings_dep
from maint_portal.auth.deps import bearer_token, get_token_subject
from maint_portal.auth.passwords import MAX_PASSWORD_BYTES, fits_bcrypt
from maint_portal.services.identity import IdentityService, IssuedToken, SignInError
from maint_portal.settings import Settings

router = APIRouter(prefix="/v1/auth", tags=["auth"])


class SignInRequest(BaseModel):
    email: str = Field(max_length=320)
    password: str = Field(max_length=72)

    @field_validator("password")
    @classmethod
    def _password_length(cls, v: str) -> str:
        # No stored password is longer than this.
        if not fits_bcrypt(v):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class TokenResponse(BaseModel):
    uid: str
    id_token: str
    token_type: str = "bearer"
    expires_in: int

    @classmethod
    def of(cls, issued: IssuedToken) -> TokenResponse:
        return cls(uid=issued.uid, id_token=issued.id_token, expires_in=issued.expires_in)


def _unauthorized(e: SignInError) -> HTTPException:
    return HTTPException(
        status_code=HTTP_401_UNAUTHORIZED,
        detail={"code": e.code, "message": e.message},
    )


@router.post("/sign-in", response_model=TokenResponse)
async def sign_in(
    body: SignInRequest,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> TokenResponse:
    svc = IdentityService(session=session, settings=settings)
    try:
        issued = await svc.sign_in(email=body.email, password=body.password)
    except SignInError as e:
        raise _unauthorized(e) from e
    return TokenResponse.of(issued)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    token: str = Depends(bearer_token),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> TokenResponse:
    svc = IdentityService(session=session, settings=settings)
    try:
        issued = await svc.refresh(id_token=token)
    except SignInError as e:
        raise _unauthorized(e) from e
    return TokenResponse.of(issued)


@router.post("/sign-out", status_code=HTTP_204_NO_CONTENT)
async def sign_out(
    uid: str = Depends(get_token_subject),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> Response:
    await IdentityService(session=session, settings=settings).sign_out(uid=uid)
    return Response(status_code=HTTP_204_NO_CONTENT)


# --- Module Notes -----------------------------------------------------------
# Tokens are stateless: sign-out is recorded for the audit trail, and the client
# discards its token. Expiry bounds how long a discarded token stays usable.
