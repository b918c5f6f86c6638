"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (400/401/403)
    MISSING_TOKEN = "MISSING_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    BAD_TOKEN_PAYLOAD = "BAD_TOKEN_PAYLOAD"

    # Not found errors (404)
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Conflict errors (409)
    DUPLICATE_KEY = "DUPLICATE_KEY"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class MissingTokenError(AppException):
    """No bearer token on the request."""

    def __init__(self, message: str = "Token missing") -> None:
        super().__init__(
            error_code=ErrorCode.MISSING_TOKEN,
            message=message,
            status_code=401,
        )


class InvalidTokenError(AppException):
    """Bearer token failed signature or expiry verification."""

    def __init__(self, message: str = "Token invalid") -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_TOKEN,
            message=message,
            status_code=403,
        )


class BadTokenPayloadError(AppException):
    """Verified token carries no usable user identifier."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.BAD_TOKEN_PAYLOAD,
            message="Invalid token payload",
            status_code=400,
        )


class AccountNotFoundError(AppException):
    """No account matches the identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            error_code=ErrorCode.ACCOUNT_NOT_FOUND,
            message="User not found",
            status_code=404,
            details={"identifier": identifier},
        )


class ProfileNotFoundError(AppException):
    """No profile exists for the owning key."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class ValidationError(AppException):
    """A write violates a record constraint."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field},
        )
        self.field = field


class DuplicateKeyError(AppException):
    """A unique key is already taken in the store."""

    def __init__(self, collection: str, key: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_KEY,
            message=f"Duplicate key in {collection}: {key}",
            status_code=409,
            details={"collection": collection, "key": key},
        )
        self.collection = collection
        self.key = key


class DatabaseConnectionError(AppException):
    """The database could not be reached."""

    def __init__(self, message: str = "Database unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=500,
        )
