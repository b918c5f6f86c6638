"""Merged account + profile routes."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from api.dependencies.auth import CurrentUser
from api.dependencies.database import get_merge_service
from api.schemas.common import AUTH_ERROR_RESPONSES, ErrorResponse
from api.schemas.merged import MergedProfileResponse
from core.rate_limit import READ_LIMIT, WRITE_LIMIT, limiter
from domain.services.merge_service import MergeService

router = APIRouter(prefix="/me", tags=["me"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "User not found"}}


@router.get(
    "",
    response_model=MergedProfileResponse,
    summary="Get my merged account and profile",
    responses={**AUTH_ERROR_RESPONSES, **_NOT_FOUND},
)
@limiter.limit(READ_LIMIT)  # type: ignore[untyped-decorator]
async def get_me(
    request: Request,
    user: CurrentUser,
    service: MergeService = Depends(get_merge_service),
) -> MergedProfileResponse:
    """Identity fields come from the account; timezone and preferences from the profile."""
    merged = await service.get_merged(user.identifier)
    return MergedProfileResponse.from_entity(merged)


@router.put(
    "",
    response_model=MergedProfileResponse,
    summary="Update my merged account and profile",
    responses={
        **AUTH_ERROR_RESPONSES,
        **_NOT_FOUND,
        400: {"model": ErrorResponse, "description": "Invalid preference value"},
    },
)
@limiter.limit(WRITE_LIMIT)  # type: ignore[untyped-decorator]
async def update_me(
    request: Request,
    user: CurrentUser,
    body: dict[str, Any] = Body(...),
    service: MergeService = Depends(get_merge_service),
) -> MergedProfileResponse:
    """Update name, avatar, image, organization, phone, timezone and preferences.

    Fields of the wrong type are ignored. The account must already exist.
    """
    merged = await service.update_merged(user.identifier, body)
    return MergedProfileResponse.from_entity(merged)
