"""Authentication provider protocol."""

from dataclasses import dataclass
from typing import Any, Optional, Protocol

# Payload claims that may carry the user identifier, in priority order.
IDENTIFIER_CLAIMS = ("email", "id", "userId", "sub")


@dataclass
class TokenUser:
    """Represents a user extracted from an auth token."""

    identifier: str
    claim: str
    email: Optional[str] = None


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    def decode_token(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify a bearer token's signature and expiry.

        Args:
            token: The bearer token to verify

        Returns:
            The payload claims if valid, None if invalid
        """
        ...

    def create_token(self, claims: dict[str, Any]) -> str:
        """
        Create a signed token carrying the given claims.

        Args:
            claims: Payload claims for the token

        Returns:
            The generated token string
        """
        ...
