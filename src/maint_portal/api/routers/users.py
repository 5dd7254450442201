"""
maint_portal.api.routers.users

User directory endpoints.

Responsibilities:
- Serve a principal's profile (role directory lookups by session clients).
- Admin user management: list and create accounts.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_404_NOT_FOUND, HTTP_409_CONFLICT

from maint_portal.api.deps import db_session, settings_dep
from maint_portal.auth.deps import get_token_subject, require_roles
from maint_portal.auth.models import Principal, Role
from maint_portal.auth.passwords import MAX_PASSWORD_BYTES, fits_bcrypt, meets_policy
from maint_portal.db.models import UserAccount
from maint_portal.db.repositories.users import UserRepo
from maint_portal.services.identity import DuplicateEmailError, IdentityService
from maint_portal.settings import Settings

router = APIRouter(prefix="/v1/users", tags=["users"])


class ProfileResponse(BaseModel):
    uid: str
    email: str
    username: str
    first_name: str
    last_name: str
    role: Role

    @classmethod
    def of(cls, user: UserAccount) -> ProfileResponse:
        return cls(
            uid=user.uid,
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
        )


class CreateUserRequest(BaseModel):
    email: str = Field(min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(min_length=6, max_length=72)
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    username: str = Field(default="", max_length=128)
    role: Role = Role.technician

    @field_validator("password")
    @classmethod
    def _password_policy(cls, v: str) -> str:
        if not fits_bcrypt(v):
            raise ValueError(
                f"Password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded"
            )
        if not meets_policy(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, "
                "and one number"
            )
        return v


@router.get("/{uid}/profile", response_model=ProfileResponse)
async def get_profile(
    uid: str,
    caller: str = Depends(get_token_subject),
    session: AsyncSession = Depends(db_session),
) -> ProfileResponse:
    repo = UserRepo(session)
    if caller != uid:
        requester = await repo.get(caller)
        # Someone else's profile: only admins may look, everyone else sees 404.
        if requester is None or requester.role is not Role.admin:
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Profile not found")
    user = await repo.get(uid)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Profile not found")
    return ProfileResponse.of(user)


@router.get(
    "",
    response_model=list[ProfileResponse],
    dependencies=[Depends(require_roles(Role.admin))],
)
async def list_users(
    role: Role | None = None,
    session: AsyncSession = Depends(db_session),
) -> list[ProfileResponse]:
    return [ProfileResponse.of(u) for u in await UserRepo(session).list_users(role=role)]


@router.post("", response_model=ProfileResponse, status_code=HTTP_201_CREATED)
async def create_user(
    body: CreateUserRequest,
    principal: Principal = Depends(require_roles(Role.admin)),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
) -> ProfileResponse:
    svc = IdentityService(session=session, settings=settings)
    try:
        user = await svc.create_user(
            actor=principal.id,
            email=body.email,
            password=body.password,
            role=body.role,
            username=body.username,
            first_name=body.first_name,
            last_name=body.last_name,
        )
    except DuplicateEmailError as e:
        raise HTTPException(status_code=HTTP_409_CONFLICT, detail=str(e)) from e
    return ProfileResponse.of(user)

