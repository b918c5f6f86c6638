"""Authentication dependencies for FastAPI."""

from typing import Annotated

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import BadTokenPayloadError, InvalidTokenError, MissingTokenError
from infrastructure.auth.jwt_provider import resolve_user
from infrastructure.auth.provider import IAuthProvider, TokenUser

# Security scheme for OpenAPI docs
security = HTTPBearer(auto_error=False)


def get_auth_provider(request: Request) -> IAuthProvider:
    """Get the auth provider owned by the application."""
    return request.app.state.auth_provider  # type: ignore[no-any-return]


async def get_current_user(
    request: Request,
    credentials: Annotated[
        HTTPAuthorizationCredentials | None,
        Depends(security),
    ],
    auth_provider: IAuthProvider = Depends(get_auth_provider),
) -> TokenUser:
    """
    Dependency to get the current authenticated user.

    Attaches the resolved identifier to ``request.state.user_identifier``
    and to the request's log context.

    Raises:
        MissingTokenError: If no bearer token was sent (401)
        InvalidTokenError: If the signature or expiry check fails (403)
        BadTokenPayloadError: If the token carries no identifier (400)
    """
    if not credentials or not credentials.credentials:
        raise MissingTokenError()

    claims = auth_provider.decode_token(credentials.credentials)
    if claims is None:
        raise InvalidTokenError()

    user = resolve_user(claims)
    if user is None:
        raise BadTokenPayloadError()

    request.state.user_identifier = user.identifier
    structlog.contextvars.bind_contextvars(user_identifier=user.identifier)
    return user


# Type alias for convenience in route handlers
CurrentUser = Annotated[TokenUser, Depends(get_current_user)]
