"""Database connection management.

The application owns exactly one :class:`DatabaseConnection`. Nothing is
opened at import or startup: the first request that needs the database
builds the engine, checks it can reach the server within
``connect_timeout`` seconds and, if configured, creates the tables. Any
request arriving while that is in flight awaits the same attempt. Once it
succeeds, the session factory is reused for the life of the process.
"""

import asyncio
from collections.abc import Callable
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.exceptions import DatabaseConnectionError
from infrastructure.database.models import Base

logger = structlog.get_logger()

EngineFactory = Callable[..., AsyncEngine]


class DatabaseConnection:
    """Lazily established, process-wide database handle."""

    def __init__(
        self,
        url: str,
        *,
        connect_timeout: float = 5.0,
        auto_create_schema: bool = True,
        echo: bool = False,
        engine_factory: EngineFactory = create_async_engine,
    ) -> None:
        self._url = url
        self._connect_timeout = connect_timeout
        self._auto_create_schema = auto_create_schema
        self._echo = echo
        self._engine_factory = engine_factory
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._pending: asyncio.Task[async_sessionmaker[AsyncSession]] | None = None

    @property
    def is_connected(self) -> bool:
        return self._session_factory is not None

    @property
    def engine(self) -> AsyncEngine | None:
        return self._engine

    async def ensure_connected(self) -> async_sessionmaker[AsyncSession]:
        """Return the session factory, connecting first if needed.

        Raises:
            DatabaseConnectionError: If this attempt could not reach the
                database. The failure is reported to every caller waiting
                on the attempt; the next call starts a new one.
        """
        if self._session_factory is not None:
            return self._session_factory

        if self._pending is None:
            self._pending = asyncio.create_task(self._connect())
        pending = self._pending

        try:
            # Shielded so one cancelled request cannot abort the shared attempt.
            session_factory = await asyncio.shield(pending)
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise

        self._session_factory = session_factory
        return session_factory

    async def dispose(self) -> None:
        """Close pooled connections and forget the handle."""
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None
        self._pending = None

    async def _connect(self) -> async_sessionmaker[AsyncSession]:
        engine: AsyncEngine | None = None
        try:
            engine = self._engine_factory(
                self._url,
                echo=self._echo,
                pool_pre_ping=True,
                connect_args=self._connect_args(),
            )
            async with asyncio.timeout(self._connect_timeout):
                async with engine.begin() as conn:
                    await conn.execute(text("SELECT 1"))
                    if self._auto_create_schema:
                        await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if engine is not None:
                await engine.dispose()
            logger.error(
                "database_connection_failed",
                error=str(e) or type(e).__name__,
                timeout_seconds=self._connect_timeout,
            )
            raise DatabaseConnectionError(
                f"Could not connect to the database: {type(e).__name__}"
            ) from e

        self._engine = engine
        logger.info(
            "database_connected",
            backend=engine.url.get_backend_name(),
            database=engine.url.database,
        )
        return async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def _connect_args(self) -> dict[str, Any]:
        # asyncpg's prepared statement cache breaks behind transaction-mode poolers.
        if "pooler" in self._url and "asyncpg" in self._url:
            return {"statement_cache_size": 0}
        return {}
