"""
maint_portal.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the API, identity, persistence and mail layers.
- Hide secrets from repr/logging (JWT secret, SMTP password, bootstrap password).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from maint_portal.auth.passwords import MAX_PASSWORD_BYTES, fits_bcrypt


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MAINT_", case_sensitive=False)

    # dev/test auto-create tables on startup; prod expects Alembic migrations.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "maint-portal"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Identity: id tokens are HS256 JWTs whose subject is the user uid.
    jwt_alg: str = "HS256"
    jwt_issuer: str = "maint-portal"
    jwt_audience: str = "maint-portal-clients"
    jwt_secret: str = Field(default="dev-secret-change-me-0123456789abcdef", repr=False)
    id_token_ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)
    bcrypt_rounds: int = Field(default=12, ge=4, le=16)

    # Seeded on startup when no account with this e-mail exists.
    bootstrap_admin_email: str | None = None
    bootstrap_admin_password: str | None = Field(default=None, repr=False)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./maint_portal.db"

    # Outgoing mail (task assignment notifications, e-mail relay endpoint).
    mail_server: str = "smtp.gmail.com"
    mail_port: int = 587
    mail_use_tls: bool = True
    mail_username: str | None = None
    mail_password: str | None = Field(default=None, repr=False)
    mail_from: str | None = None

    # Base URL used by session clients to reach the Portal API.
    portal_base_url: str = "http://localhost:8080"

    @field_validator("bootstrap_admin_password")
    @classmethod
    def _bootstrap_password_fits_bcrypt(cls, v: str | None) -> str | None:
        if v is not None and not fits_bcrypt(v):
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests construct `Settings(...)` directly and pass it to `create_app`; only the
# process entrypoint relies on the cached instance.
