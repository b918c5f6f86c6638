"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode

READ_LIMIT = "60/minute"
WRITE_LIMIT = "20/minute"


def rate_limit_key(request: Request) -> str:
    """Bucket authenticated callers by token identifier, others by address.

    Route limits are checked after the auth dependency has run, so
    ``request.state.user_identifier`` is set for every authenticated call.
    """
    identifier = getattr(request.state, "user_identifier", None)
    if identifier:
        return f"user:{identifier}"
    return get_remote_address(request)


limiter = Limiter(key_func=rate_limit_key, enabled=settings.rate_limit_enabled)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """429 with the breached limit and how long until its window resets."""
    retry_after = exc.limit.limit.get_expiry()
    return JSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Rate limit exceeded: {exc.detail}",
            "details": {"limit": exc.detail, "retry_after_seconds": retry_after},
        },
        headers={"Retry-After": str(retry_after)},
    )
