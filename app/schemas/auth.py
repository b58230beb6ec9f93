"""Request/response schemas for auth endpoints."""

import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)

# Lowercase, uppercase and a digit; checked in a validator because pydantic
# patterns do not support lookahead.
_PASSWORD_RULES = (re.compile(r"[a-z]"), re.compile(r"[A-Z]"), re.compile(r"\d"))


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; accepts either on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(CamelModel):
    """Credentials for login."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, description="Password")


class RegisterRequest(CamelModel):
    """New account details."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Unique username",
        examples=["johndoe"],
    )
    email: EmailStr = Field(..., description="Unique email address", examples=["john@example.com"])
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="At least 8 characters with uppercase, lowercase, and number",
    )
    first_name: str = Field(..., min_length=1, max_length=50, examples=["John"])
    last_name: str = Field(..., min_length=1, max_length=50, examples=["Doe"])

    @field_validator("username", "first_name", "last_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if not all(rule.search(v) for rule in _PASSWORD_RULES):
            raise ValueError(
                "Password must be at least 8 characters with uppercase, lowercase, and number"
            )
        return v


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token from login/register")


class AuthenticationResponse(CamelModel):
    """Tokens returned by register, login and refresh."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field(default="Bearer", description="Token type (always 'Bearer')")
    expires_in: int = Field(..., description="Access token lifetime in seconds")


class UserResponse(CamelModel):
    """User profile (no password)."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: str
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: str
    created_at: datetime
    last_login_at: datetime | None = None
