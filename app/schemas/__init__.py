"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthenticationResponse,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    UserResponse,
)
from app.schemas.error import ErrorResponse, ValidationErrorResponse
from app.schemas.health import HealthResponse
from app.schemas.item import ItemResponse

__all__ = [
    "AuthenticationResponse",
    "ErrorResponse",
    "HealthResponse",
    "ItemResponse",
    "LoginRequest",
    "RefreshTokenRequest",
    "RegisterRequest",
    "UserResponse",
    "ValidationErrorResponse",
]
