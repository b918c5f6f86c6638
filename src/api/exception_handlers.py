"""Exception handlers for the FastAPI application.

Every failure leaves the API as ``{"error_code", "message", "details"}``.
"""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas.common import ErrorResponse
from core.config import settings
from core.exceptions import AppException, ErrorCode, MissingTokenError

logger = structlog.get_logger()

HTTP_ERROR_CODE = "HTTP_ERROR"


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Any | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Render the shared error body."""
    body = ErrorResponse(error_code=error_code, message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Auth, lookup, validation and connection failures raised by the services."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "app_exception",
        error_code=exc.error_code.value,
        message=exc.message,
        status_code=exc.status_code,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, MissingTokenError) else None
    return error_response(
        exc.status_code, exc.error_code.value, exc.message, exc.details, headers
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Unknown routes and methods."""
    return error_response(
        exc.status_code,
        HTTP_ERROR_CODE,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Only reachable for bodies that are not a JSON object.
    errors = exc.errors()
    logger.info("request_body_rejected", errors=errors)
    return error_response(
        422,
        ErrorCode.VALIDATION_ERROR.value,
        "Request body must be a JSON object",
        [
            {
                "field": ".".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in errors
        ],
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _request_id(request)
    logger.error(
        "unhandled_exception",
        error_type=type(exc).__name__,
        request_id=request_id,
        exc_info=exc,
    )
    message = "An unexpected error occurred" if settings.is_production else str(exc)
    return error_response(
        500, ErrorCode.INTERNAL_ERROR.value, message, {"request_id": request_id}
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app."""
    app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
