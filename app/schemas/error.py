"""Error bodies returned by the exception handlers."""

from datetime import datetime

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-validation error response."""

    timestamp: datetime = Field(description="When the error occurred (UTC)")
    status: int = Field(description="HTTP status code")
    error: str = Field(description="Short error category, e.g. Conflict")
    message: str = Field(description="Human-readable explanation")


class ValidationErrorResponse(ErrorResponse):
    """Error body for rejected request data, with one message per field."""

    errors: dict[str, str] = Field(default_factory=dict)
