"""JWT authentication provider implementation.

Tokens are issued elsewhere and only verified here, against the shared
secret. The user identifier is the first non-empty claim among
``email``, ``id``, ``userId`` and ``sub``:

    {
        "sub": "u1",
        "email": "user@example.com",
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from jose import JWTError, jwt

from core.config import settings
from infrastructure.auth.provider import IDENTIFIER_CLAIMS, TokenUser

logger = logging.getLogger(__name__)


def resolve_user(claims: dict[str, Any]) -> Optional[TokenUser]:
    """Build a TokenUser from verified claims, or None if no identifier is present."""
    for name in IDENTIFIER_CLAIMS:
        value = claims.get(name)
        if value is None or isinstance(value, (dict, list, bool)):
            continue
        identifier = str(value).strip()
        if identifier:
            email = claims.get("email")
            return TokenUser(
                identifier=identifier,
                claim=name,
                email=email if isinstance(email, str) and email else None,
            )
    return None


class JWTAuthProvider:
    """JWT-based authentication provider (HMAC shared secret)."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    def decode_token(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify a JWT's signature and expiry.

        Args:
            token: The JWT to verify

        Returns:
            The payload claims if valid, None if invalid or expired
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except JWTError as e:
            logger.info("Rejected bearer token: %s", e)
            return None

        if not isinstance(claims, dict):
            return None
        return claims

    def create_token(self, claims: dict[str, Any]) -> str:
        """
        Create a signed JWT (used by tests and local tooling).

        Args:
            claims: Payload claims; ``exp`` is added unless present

        Returns:
            The generated JWT string
        """
        payload = dict(claims)
        payload.setdefault(
            "exp", datetime.utcnow() + timedelta(minutes=self._expire_minutes)
        )
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
