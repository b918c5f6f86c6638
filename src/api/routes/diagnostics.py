"""Liveness and diagnostic endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends

from api.dependencies.auth import CurrentUser
from api.dependencies.database import Database, UowFactory, get_uow_factory
from api.schemas.common import AUTH_ERROR_RESPONSES
from api.schemas.diagnostics import DebugDatabaseResponse, DebugTokenResponse, PingResponse
from core.config import settings
from infrastructure.database.models import AccountModel, ProfileModel

API_VERSION = "1.0.0"

router = APIRouter(tags=["diagnostics"])
debug_router = APIRouter(tags=["diagnostics"], responses=AUTH_ERROR_RESPONSES)


@router.get("/ping", response_model=PingResponse, summary="Liveness check")
async def ping() -> PingResponse:
    """
    Liveness echo for load balancers.

    Does not authenticate or touch the database.
    """
    return PingResponse(
        message="pong",
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        environment=settings.app_env,
    )


@debug_router.get(
    "/debug-token",
    response_model=DebugTokenResponse,
    summary="Show the identifier resolved from my token",
)
async def debug_token(user: CurrentUser) -> DebugTokenResponse:
    """Report which identifier the token resolved to and which claim supplied it."""
    return DebugTokenResponse(identifier=user.identifier, claim=user.claim)


@debug_router.get(
    "/debug-db",
    response_model=DebugDatabaseResponse,
    summary="Database connectivity and record counts",
)
async def debug_db(
    user: CurrentUser,
    database: Database,
    uow_factory: UowFactory = Depends(get_uow_factory),
) -> DebugDatabaseResponse:
    """Connect if needed, then count stored accounts and profiles."""
    async with uow_factory() as uow:
        accounts = await uow.accounts.count()
        profiles = await uow.profiles.count()

    engine = database.engine
    return DebugDatabaseResponse(
        status="connected" if database.is_connected else "disconnected",
        database=engine.url.get_backend_name() if engine is not None else "unknown",
        collections={
            AccountModel.__tablename__: accounts,
            ProfileModel.__tablename__: profiles,
        },
    )
