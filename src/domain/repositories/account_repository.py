"""Account repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.account import Account


class IAccountRepository(Protocol):
    """Repository interface for Account entities."""

    async def get_by_email(self, email: str) -> Account | None:
        """Get an account by its identity key."""
        ...

    async def get(self, id: UUID) -> Account | None:
        """Get an account by internal record id."""
        ...

    async def update_fields(self, id: UUID, changes: dict[str, str]) -> Account | None:
        """Set fields on an existing account; None if it does not exist."""
        ...

    async def count(self) -> int:
        """Number of stored accounts."""
        ...
