"""Profile repository protocol."""

from typing import Any, Protocol

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get_by_user_id(self, user_id: str) -> Profile | None:
        """Get the profile owned by an identity key."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a profile; raises DuplicateKeyError if one already exists."""
        ...

    async def upsert(self, user_id: str, changes: dict[str, Any]) -> Profile:
        """Apply changes to the owned profile, creating it if absent."""
        ...

    async def count(self) -> int:
        """Number of stored profiles."""
        ...
