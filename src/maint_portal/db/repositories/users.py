"""
maint_portal.db.repositories.users

Repository for `UserAccount` entities (the user directory).
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from maint_portal.auth.models import Role
from maint_portal.db.models import UserAccount


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role,
        username: str = "",
        first_name: str = "",
        last_name: str = "",
    ) -> UserAccount:
        user = UserAccount(
            email=email.strip().lower(),
            password_hash=password_hash,
            role=role,
            username=username,
            first_name=first_name,
            last_name=last_name,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def get(self, uid: str) -> UserAccount | None:
        return await self._session.get(UserAccount, uid)

    async def get_by_email(self, email: str) -> UserAccount | None:
        # E-mail addresses are stored lower-cased; lookups normalise the same way.
        stmt = select(UserAccount).where(UserAccount.email == email.strip().lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list_users(self, *, role: Role | None = None) -> list[UserAccount]:
        stmt = select(UserAccount).order_by(UserAccount.created_at)
        if role is not None:
            stmt = stmt.where(UserAccount.role == role)
        return list((await self._session.execute(stmt)).scalars().all())
