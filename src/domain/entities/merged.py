"""Merged account + profile view."""

from collections.abc import Callable, Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from domain.entities.account import ACCOUNT_TEXT_FIELDS, Account
from domain.entities.profile import DEFAULT_TIMEZONE, Profile, normalize_preferences


class Source(Enum):
    """Record a merged field may be read from."""

    ACCOUNT = "account"
    PROFILE = "profile"


@dataclass(frozen=True, slots=True)
class MergeRule:
    """One merged field: the records to read, in order, and its fallback."""

    name: str
    sources: tuple[Source, ...]
    default: Callable[[], Any] = str


# Order matters: the first source holding a truthy value wins.
MERGE_RULES: tuple[MergeRule, ...] = (
    MergeRule("email", (Source.ACCOUNT,)),
    MergeRule("name", (Source.ACCOUNT,)),
    MergeRule("avatar", (Source.ACCOUNT,)),
    MergeRule("image", (Source.ACCOUNT,)),
    MergeRule("organization", (Source.ACCOUNT, Source.PROFILE)),
    MergeRule("phone", (Source.ACCOUNT, Source.PROFILE)),
    MergeRule("timezone", (Source.PROFILE,), lambda: DEFAULT_TIMEZONE),
    MergeRule("preferences", (Source.PROFILE,), dict),
)


@dataclass(frozen=True, slots=True)
class MergedProfile:
    """Read-only value object combining an account with its profile."""

    email: str
    name: str = ""
    avatar: str = ""
    image: str = ""
    organization: str = ""
    phone: str = ""
    timezone: str = DEFAULT_TIMEZONE
    preferences: dict[str, Any] = field(default_factory=dict)


def merge_view(account: Account, profile: Profile | None) -> MergedProfile:
    """Apply :data:`MERGE_RULES` to an account and its (optional) profile."""
    records: dict[Source, Any] = {Source.ACCOUNT: account, Source.PROFILE: profile}
    values: dict[str, Any] = {}
    for rule in MERGE_RULES:
        value = None
        for source in rule.sources:
            record = records[source]
            candidate = getattr(record, rule.name, None) if record is not None else None
            if candidate:
                value = deepcopy(candidate)
                break
        values[rule.name] = value if value is not None else rule.default()
    return MergedProfile(**values)


@dataclass(frozen=True, slots=True)
class MergedUpdate:
    """A merged update body split by the record each field belongs to."""

    account_changes: dict[str, str]
    profile_changes: dict[str, Any]


def partition_merged_update(body: Mapping[str, Any]) -> MergedUpdate:
    """Split a merged update body into account and profile changes.

    Account fields and the timezone are taken only when they are text;
    anything else is ignored. Preferences are taken only when they are an
    object, and are validated against the unit enums.
    """
    account_changes = {
        name: body[name]
        for name in ACCOUNT_TEXT_FIELDS
        if isinstance(body.get(name), str)
    }

    profile_changes: dict[str, Any] = {}
    if isinstance(body.get("timezone"), str):
        profile_changes["timezone"] = body["timezone"]
    if isinstance(body.get("preferences"), Mapping):
        profile_changes["preferences"] = normalize_preferences(body["preferences"])

    return MergedUpdate(account_changes=account_changes, profile_changes=profile_changes)
