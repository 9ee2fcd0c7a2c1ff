"""Pydantic schemas for users, authentication and profiles."""

import re
from datetime import datetime

from pydantic import EmailStr, Field, HttpUrl, field_validator, model_validator

from app.schemas.common import CamelModel

_PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")


def _check_password_strength(value: str) -> str:
    if len(value) < 6:
        raise ValueError("Password must be at least 6 characters")
    if not _PASSWORD_PATTERN.match(value):
        raise ValueError(
            "Password must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return value


class UserRead(CamelModel):
    """Public user identity; never includes the password hash."""

    id: int
    name: str
    email: str
    avatar: str | None = None
    bio: str | None = None
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserStats(CamelModel):
    total_animes: int
    favorite_count: int
    joined_days: int


class RegisterRequest(CamelModel):
    name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be between 2 and 100 characters")
        return value

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password_strength(value)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(CamelModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    email: EmailStr | None = None
    bio: str | None = Field(None, max_length=500)
    avatar: HttpUrl | None = None


class PasswordChange(CamelModel):
    old_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return _check_password_strength(value)

    @model_validator(mode="after")
    def passwords_differ(self) -> "PasswordChange":
        if self.old_password == self.new_password:
            raise ValueError("New password must be different from current password")
        return self
