"""Domain exceptions raised by services and the handlers that render them."""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.schemas.error import ErrorResponse, ValidationErrorResponse

logger = logging.getLogger(__name__)


class WardrobeError(Exception):
    """Base for errors that map to a specific HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateUserError(WardrobeError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"

    @classmethod
    def with_username(cls, username: str) -> "DuplicateUserError":
        return cls(f"User with username {username} already exists")

    @classmethod
    def with_email(cls, email: str) -> "DuplicateUserError":
        return cls(f"User with email {email} already exists")


class InvalidCredentialsError(WardrobeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class UserNotFoundError(WardrobeError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"

    @classmethod
    def with_username(cls, username: str) -> "UserNotFoundError":
        return cls(f"User with username {username} not found")

    @classmethod
    def with_id(cls, user_id: str) -> "UserNotFoundError":
        return cls(f"User with id {user_id} not found")


class ItemNotFoundError(WardrobeError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Item Not Found"

    @classmethod
    def with_id(cls, item_id: str) -> "ItemNotFoundError":
        return cls(f"Item not found with id: {item_id}")


class ItemAccessDeniedError(WardrobeError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Access Denied"

    @classmethod
    def with_id(cls, item_id: str) -> "ItemAccessDeniedError":
        return cls(f"Access denied to item with id: {item_id}")


class ImageNotFoundError(WardrobeError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Image Not Found"

    @classmethod
    def with_id(cls, image_id: str) -> "ImageNotFoundError":
        return cls(f"Image not found with id: {image_id}")


class InvalidImageError(WardrobeError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"

    @classmethod
    def invalid_type(cls, content_type: str | None) -> "InvalidImageError":
        return cls(f"Invalid image type: {content_type}. Only JPEG, PNG, and WebP are allowed.")

    @classmethod
    def too_large(cls, size: int, max_size: int) -> "InvalidImageError":
        return cls(
            f"Image size {size} bytes exceeds maximum allowed size of {max_size} bytes."
        )


def _error_body(status_code: int, error: str, message: str) -> dict:
    body = ErrorResponse(
        timestamp=datetime.now(UTC),
        status=status_code,
        error=error,
        message=message,
    )
    return body.model_dump(mode="json")


async def wardrobe_error_handler(request: Request, exc: WardrobeError) -> JSONResponse:
    logger.warning(
        "%s: %s",
        type(exc).__name__,
        exc.message,
        extra={"path": request.url.path, "status": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.status_code, exc.error, exc.message),
    )


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    logger.warning("Bad request: %s", exc, extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(status.HTTP_400_BAD_REQUEST, "Bad Request", str(exc)),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors: dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors[".".join(loc) or "request"] = err.get("msg", "Invalid value")
    logger.info("Validation error on %s: %s", request.url.path, errors)
    body = ValidationErrorResponse(
        timestamp=datetime.now(UTC),
        status=status.HTTP_400_BAD_REQUEST,
        error="Validation Failed",
        message="Invalid input data",
        errors=errors,
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WardrobeError, wardrobe_error_handler)
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
