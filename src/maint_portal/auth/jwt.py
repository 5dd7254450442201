"""
maint_portal.auth.jwt

Id token issuing and validation helpers.

Responsibilities:
- Issue short-lived id tokens after a successful sign-in or refresh.
- Decode and validate id tokens with strict claim requirements (iss/aud/exp/iat/sub).

Note:
- Tokens carry only the user uid. The role is always read from the user directory,
  so a role change takes effect on the next request rather than at token expiry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from maint_portal.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


class JwtValidationError(Exception):
    pass


def issue_token(*, cfg: JwtConfig, subject: str, ttl: timedelta = timedelta(hours=1)) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_and_validate(*, cfg: JwtConfig, token: str) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e


def subject_of(*, cfg: JwtConfig, token: str) -> str:
    subject = str(decode_and_validate(cfg=cfg, token=token).get("sub", ""))
    if not subject:
        raise JwtValidationError("empty subject")
    return subject


# --- Module Notes -----------------------------------------------------------
# Used by `services.identity` (issue/refresh) and `auth.deps` (bearer validation).
