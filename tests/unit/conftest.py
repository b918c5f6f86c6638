"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.account import Account


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.accounts = AsyncMock()
        self.profiles = AsyncMock()
        self.commits = 0
        self.rollbacks = 0

    @property
    def committed(self) -> bool:
        return self.commits > 0

    @property
    def rolled_back(self) -> bool:
        return self.rollbacks > 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def account() -> Account:
    """An account with only the identity key and a name set."""
    return Account(email="ann@example.com", name="Ann")
