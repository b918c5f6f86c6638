"""Profile API routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from api.dependencies.auth import CurrentUser
from api.dependencies.database import get_profile_service
from api.schemas.common import AUTH_ERROR_RESPONSES, ErrorResponse
from api.schemas.profile import ProfileResponse
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get(
    "",
    response_model=ProfileResponse,
    summary="Get my profile",
    responses=AUTH_ERROR_RESPONSES,
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Get the caller's profile settings. Created with defaults on first access."""
    profile = await service.get_or_create(user.identifier)
    return ProfileResponse.from_entity(profile)


@router.put(
    "",
    response_model=ProfileResponse,
    summary="Update my profile",
    responses={
        **AUTH_ERROR_RESPONSES,
        400: {"model": ErrorResponse, "description": "Invalid field value"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_profile(
    request: Request,
    user: CurrentUser,
    body: dict[str, Any] = Body(...),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    """Partially update the caller's profile, creating it if needed.

    ``userId``, ``id`` and the timestamps are ignored if sent.
    """
    profile = await service.update(user.identifier, body)
    return ProfileResponse.from_entity(profile)
