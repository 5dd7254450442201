"""
maint_portal.services.identity

Identity service (credential verification + user directory writes).

Responsibilities:
- Verify e-mail/password pairs and issue id tokens.
- Refresh id tokens for accounts that still exist.
- Create user accounts and seed the bootstrap admin.
- Record sign-in, sign-out and user-creation audit events.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from maint_portal.auth.jwt import JwtConfig, JwtValidationError, issue_token, subject_of
from maint_portal.auth.models import Role
from maint_portal.auth.passwords import hash_password, verify_password
from maint_portal.db.models import UserAccount
from maint_portal.db.repositories.audit import AuditRepo
from maint_portal.db.repositories.users import UserRepo
from maint_portal.observability.logging import get_logger
from maint_portal.settings import Settings

log = get_logger(__name__)

INVALID_CREDENTIAL = "auth/invalid-credential"
USER_NOT_FOUND = "auth/user-not-found"
WRONG_PASSWORD = "auth/wrong-password"

_MESSAGES = {
    INVALID_CREDENTIAL: "Invalid email or password",
    USER_NOT_FOUND: "No account found with this email",
    WRONG_PASSWORD: "Invalid password",
}


class SignInError(Exception):
    def __init__(self, code: str) -> None:
        super().__init__(_MESSAGES.get(code, code))
        self.code = code
        self.message = _MESSAGES.get(code, code)


class DuplicateEmailError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class IssuedToken:
    uid: str
    id_token: str
    expires_in: int


class IdentityService:
    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._users = UserRepo(session)
        self._audit = AuditRepo(session)
        self._jwt = JwtConfig.from_settings(settings)

    def _issue(self, uid: str) -> IssuedToken:
        ttl = timedelta(minutes=self._settings.id_token_ttl_minutes)
        token = issue_token(cfg=self._jwt, subject=uid, ttl=ttl)
        return IssuedToken(uid=uid, id_token=token, expires_in=int(ttl.total_seconds()))

    async def sign_in(self, *, email: str, password: str) -> IssuedToken:
        email = email.strip().lower()
        if not email or not password:
            raise SignInError(INVALID_CREDENTIAL)

        user = await self._users.get_by_email(email)
        if user is None:
            await self._reject(email, USER_NOT_FOUND)
        # bcrypt is deliberately slow; keep it off the event loop.
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            await self._reject(email, WRONG_PASSWORD, subject_id=user.uid)

        await self._audit.add(actor=user.uid, event_type="SIGN_IN_SUCCEEDED", subject_id=user.uid)
        await self._session.commit()
        log.info("sign_in_succeeded", uid=user.uid, role=user.role.value)
        return self._issue(user.uid)

    async def _reject(self, email: str, code: str, *, subject_id: str | None = None) -> NoReturn:
        await self._audit.add(
            actor=email, event_type="SIGN_IN_FAILED", subject_id=subject_id, details={"code": code}
        )
        await self._session.commit()
        log.info("sign_in_failed", email=email, code=code)
        raise SignInError(code)

    async def refresh(self, *, id_token: str) -> IssuedToken:
        try:
            uid = subject_of(cfg=self._jwt, token=id_token)
        except JwtValidationError as e:
            raise SignInError(INVALID_CREDENTIAL) from e
        if await self._users.get(uid) is None:
            raise SignInError(USER_NOT_FOUND)
        return self._issue(uid)

    async def sign_out(self, *, uid: str) -> None:
        await self._audit.add(actor=uid, event_type="SIGNED_OUT", subject_id=uid)
        await self._session.commit()
        log.info("signed_out", uid=uid)

    async def create_user(
        self,
        *,
        actor: str,
        email: str,
        password: str,
        role: Role,
        username: str = "",
        first_name: str = "",
        last_name: str = "",
    ) -> UserAccount:
        if await self._users.get_by_email(email) is not None:
            raise DuplicateEmailError("Email is already registered")

        password_hash = await asyncio.to_thread(
            hash_password, password, rounds=self._settings.bcrypt_rounds
        )
        user = await self._users.create(
            email=email,
            password_hash=password_hash,
            role=role,
            username=username,
            first_name=first_name,
            last_name=last_name,
        )
        await self._audit.add(
            actor=actor,
            event_type="USER_CREATED",
            subject_id=user.uid,
            details={"email": user.email, "role": role.value},
        )
        await self._session.commit()
        log.info("user_created", uid=user.uid, role=role.value, actor=actor)
        return user

    async def ensure_bootstrap_admin(self) -> UserAccount | None:
        email = self._settings.bootstrap_admin_email
        password = self._settings.bootstrap_admin_password
        if not email or not password:
            return None
        existing = await self._users.get_by_email(email)
        if existing is not None:
            return existing
        return await self.create_user(
            actor="system", email=email, password=password, role=Role.admin, username="admin"
        )


# --- Module Notes -----------------------------------------------------------
# Distinct user-not-found / wrong-password codes let clients show a specific inline
# login message; see `session.verifier` for the client-side mapping.
