"""Common Pydantic schemas shared across the API."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error_code: str
    message: str
    details: Any | None = None


AUTH_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Token carries no user identifier"},
    401: {"model": ErrorResponse, "description": "Bearer token missing"},
    403: {"model": ErrorResponse, "description": "Bearer token invalid or expired"},
}
