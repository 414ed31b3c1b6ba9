"""Request/response schemas for user endpoints."""

from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from notes_api.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from notes_api.schemas.base import ApiModel


def _clean_roles(roles: list[str] | None) -> list[str] | None:
    if roles is None:
        return None
    cleaned = [r.strip() for r in roles if r and r.strip()]
    return list(dict.fromkeys(cleaned))


class UserCreate(ApiModel):
    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    roles: list[str] | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < USERNAME_MIN_LEN:
            raise ValueError(f"username must be at least {USERNAME_MIN_LEN} characters")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("roles")
    @classmethod
    def clean_roles(cls, v: list[str] | None) -> list[str] | None:
        return _clean_roles(v)


class UserUpdate(ApiModel):
    """Full replacement of profile fields; password is changed only when given."""

    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    roles: list[str] = Field(..., min_length=1)
    active: bool
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN
    )

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        v = v.strip()
        if len(v) < USERNAME_MIN_LEN:
            raise ValueError(f"username must be at least {USERNAME_MIN_LEN} characters")
        return v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("roles")
    @classmethod
    def clean_roles(cls, v: list[str]) -> list[str]:
        cleaned = _clean_roles(v)
        if not cleaned:
            raise ValueError("roles must contain at least one role")
        return cleaned


class UserOut(ApiModel):
    """User as returned by the API (never includes the password hash)."""

    id: int
    username: str
    email: str
    roles: list[str]
    active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None
