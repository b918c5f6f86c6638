"""Account domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

DEFAULT_ACCOUNT_ROLE = "user"

ACCOUNT_TEXT_FIELDS = ("name", "avatar", "image", "organization", "phone")


@dataclass
class Account:
    """Identity record owned by the identity provider.

    The email is the identity key and is authoritative for the
    identity-ish fields when merged with a profile.
    """

    email: str
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    avatar: str = ""
    image: str = ""
    organization: str = ""
    phone: str = ""
    role: str = DEFAULT_ACCOUNT_ROLE
    is_profile_complete: bool = False
    last_login: datetime | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
