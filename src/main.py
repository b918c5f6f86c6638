"""Main FastAPI application entry point."""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.exception_handlers import setup_exception_handlers
from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import RequestIDMiddleware
from api.routes import debug_router
from api.routes import router as api_router
from api.routes.diagnostics import API_VERSION
from core.config import Settings, get_settings
from core.logging import setup_logging
from core.rate_limit import limiter, rate_limit_exceeded_handler
from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.auth.provider import IAuthProvider
from infrastructure.database.connection import DatabaseConnection

logger = structlog.get_logger()


def create_app(
    settings: Settings | None = None,
    database: DatabaseConnection | None = None,
    auth_provider: IAuthProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    This is the composition root: the app owns the single database handle
    and the token verifier, and route dependencies read them from
    ``app.state``.
    """
    settings = settings or get_settings()

    setup_logging(settings.log_level, json_logs=settings.use_json_logs)

    app = FastAPI(
        default_response_class=ORJSONResponse,
        title=settings.app_name,
        description=(
            "## User Profile Settings\n\n"
            "Stores per-user profile settings (bio, contact details, timezone, "
            "notification and unit preferences) next to account identity "
            "records, and serves a merged view of both.\n\n"
            "### Authentication\n"
            "All endpoints except `/api/ping` require a valid JWT "
            "in the Authorization header:\n"
            "```\nAuthorization: Bearer <your_token>\n```"
        ),
        version=API_VERSION,
        debug=settings.debug,
        openapi_tags=[
            {
                "name": "profile",
                "description": "Profile settings, created on first access",
            },
            {
                "name": "me",
                "description": "Merged account and profile view",
            },
            {
                "name": "diagnostics",
                "description": "Liveness and debugging endpoints",
            },
        ],
    )

    app.state.database = database or DatabaseConnection(
        settings.async_database_url,
        connect_timeout=settings.database_connect_timeout,
        auto_create_schema=settings.database_auto_create_schema,
        echo=settings.debug,
    )
    app.state.auth_provider = auth_provider or JWTAuthProvider(
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_middleware(SlowAPIMiddleware)

    # Tracking middleware (LIFO order - last added = outermost)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # GZip compression for responses > 1KB
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(api_router, prefix="/api")
    if settings.debug_routes_enabled:
        app.include_router(debug_router, prefix="/api")

    logger.info(
        "app_created",
        environment=settings.app_env,
        debug_routes=settings.debug_routes_enabled,
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "main:app",
        host=_settings.host,
        port=_settings.port,
        reload=not _settings.is_production,
    )
