"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

# Required settings must exist before any application module is imported
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from infrastructure.auth.jwt_provider import JWTAuthProvider
from infrastructure.database.connection import DatabaseConnection
from infrastructure.database.models import AccountModel

TEST_SECRET = "test-secret-key"
TEST_EMAIL = "ann@example.com"


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[DatabaseConnection, None]:
    """A connection manager over a fresh SQLite file per test."""
    connection = DatabaseConnection(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    yield connection
    await connection.dispose()


@pytest.fixture
async def session_factory(
    database: DatabaseConnection,
) -> async_sessionmaker[AsyncSession]:
    """Connected session factory (tables created)."""
    return await database.ensure_connected()


@pytest.fixture
def auth_provider() -> JWTAuthProvider:
    """Create auth provider for testing."""
    return JWTAuthProvider(
        secret_key=TEST_SECRET,
        algorithm="HS256",
        expire_minutes=30,
    )


@pytest.fixture
def make_token(auth_provider: JWTAuthProvider) -> Callable[..., str]:
    """Mint a signed token carrying arbitrary claims."""

    def _make(**claims: Any) -> str:
        return auth_provider.create_token(claims)

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> dict[str, str]:
    """Authorization headers for the default test user."""
    return {"Authorization": f"Bearer {make_token(email=TEST_EMAIL)}"}


@pytest.fixture
def seed_account(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[AccountModel]]:
    """Insert an account row directly, as the identity provider would."""

    async def _seed(email: str = TEST_EMAIL, **fields: Any) -> AccountModel:
        async with session_factory() as session:
            model = AccountModel(email=email, **fields)
            session.add(model)
            await session.commit()
            return model

    return _seed


@pytest.fixture
def app(database: DatabaseConnection, auth_provider: JWTAuthProvider) -> FastAPI:
    """Application wired to the per-test database."""
    from main import create_app

    return create_app(database=database, auth_provider=auth_provider)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client (no auth)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def authenticated_client(
    app: FastAPI, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Async test client sending the default user's bearer token."""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=auth_headers
    ) as c:
        yield c
