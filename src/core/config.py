"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    ``DATABASE_URL`` and ``JWT_SECRET_KEY`` have no defaults: the process
    refuses to start without them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Profile API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool | None = Field(
        default=None,
        description="Render logs as JSON (defaults to on in production)",
    )

    # Database
    database_url: str = Field(
        ...,
        description="Database connection URL (postgresql:// or sqlite+aiosqlite://)",
    )
    database_connect_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Seconds to wait for the first connection before failing",
    )
    database_auto_create_schema: bool = Field(
        default=True,
        description="Create tables and unique indexes on first connect",
    )

    # JWT Authentication
    jwt_secret_key: str = Field(
        ...,
        min_length=1,
        description="Shared secret used to verify bearer tokens",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=30)

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # Diagnostics
    debug_routes_enabled: bool = Field(
        default=True,
        description="Mount /api/debug-token and /api/debug-db",
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def use_json_logs(self) -> bool:
        """JSON logs unless explicitly disabled; console logs outside production."""
        if self.log_json is None:
            return self.is_production
        return self.log_json

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


settings = get_settings()
