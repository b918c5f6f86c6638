"""API router configuration."""

from fastapi import APIRouter

from api.routes.diagnostics import debug_router
from api.routes.diagnostics import router as diagnostics_router
from api.routes.me import router as me_router
from api.routes.profile import router as profile_router

router = APIRouter()
router.include_router(profile_router)
router.include_router(me_router)
router.include_router(diagnostics_router)

__all__ = ["router", "debug_router"]
