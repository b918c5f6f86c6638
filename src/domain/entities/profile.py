"""Profile domain entity and its validation rules.

A profile holds supplementary settings for one account, keyed by the
account's identity (``user_id``). Preferences are kept as a sparse JSON
document: only what a client has set is stored, and defaults are filled
in on read by :func:`resolve_preferences`.
"""

from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from core.exceptions import ValidationError

DEFAULT_TIMEZONE = "Africa/Tunis"
DEFAULT_LANGUAGE = "en"


class TemperatureUnit(StrEnum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


class DistanceUnit(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"


# Notification toggle -> default. criticalOnly narrows the others, so it starts off.
NOTIFICATION_DEFAULTS: dict[str, bool] = {
    "emailAlerts": True,
    "criticalOnly": False,
    "dailySummary": True,
    "maintenanceReminders": True,
}

UNIT_CHOICES: dict[str, type[StrEnum]] = {
    "temperature": TemperatureUnit,
    "distance": DistanceUnit,
}

UNIT_DEFAULTS: dict[str, str] = {
    "temperature": TemperatureUnit.CELSIUS.value,
    "distance": DistanceUnit.METRIC.value,
}

# Text field -> value a null in an update body resets it to.
PROFILE_TEXT_DEFAULTS: dict[str, str] = {
    "bio": "",
    "organization": "",
    "role": "",
    "phone": "",
    "timezone": DEFAULT_TIMEZONE,
}

IMMUTABLE_PROFILE_FIELDS = frozenset(
    {
        "userId",
        "user_id",
        "_id",
        "id",
        "createdAt",
        "created_at",
        "updatedAt",
        "updated_at",
    }
)


@dataclass
class Profile:
    """Domain entity for a user's profile settings."""

    user_id: str
    id: UUID = field(default_factory=uuid4)
    bio: str = ""
    organization: str = ""
    role: str = ""
    phone: str = ""
    timezone: str = DEFAULT_TIMEZONE
    preferences: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    def apply(self, changes: Mapping[str, Any]) -> None:
        """Apply already-validated changes in place."""
        for name, value in changes.items():
            setattr(self, name, deepcopy(value))

    @property
    def resolved_preferences(self) -> dict[str, Any]:
        """Preferences with every unset value filled from the defaults."""
        return resolve_preferences(self.preferences)


def default_preferences() -> dict[str, Any]:
    """Build a fresh, fully populated preferences document."""
    return {
        "notifications": dict(NOTIFICATION_DEFAULTS),
        "units": dict(UNIT_DEFAULTS),
        "language": DEFAULT_LANGUAGE,
    }


def resolve_preferences(stored: Mapping[str, Any] | None) -> dict[str, Any]:
    """Overlay a stored (possibly sparse) preferences document on the defaults."""
    resolved = default_preferences()
    if not stored:
        return resolved
    resolved["notifications"].update(stored.get("notifications") or {})
    resolved["units"].update(stored.get("units") or {})
    if stored.get("language"):
        resolved["language"] = stored["language"]
    return resolved


def _section(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(name, f"{name} must be an object")
    return value


def normalize_preferences(value: Any) -> dict[str, Any]:
    """Validate a client-supplied preferences object.

    Unknown keys are dropped. Toggles must be booleans, units must be one of
    their enum values and the language must be text. Raises
    :class:`ValidationError` on the first violation.
    """
    data = _section(value, "preferences")
    normalized: dict[str, Any] = {}

    if "notifications" in data:
        notifications = _section(data["notifications"], "preferences.notifications")
        toggles: dict[str, bool] = {}
        for name in NOTIFICATION_DEFAULTS:
            if name not in notifications:
                continue
            toggle = notifications[name]
            if not isinstance(toggle, bool):
                raise ValidationError(
                    f"preferences.notifications.{name}",
                    f"preferences.notifications.{name} must be a boolean",
                )
            toggles[name] = toggle
        if toggles:
            normalized["notifications"] = toggles

    if "units" in data:
        units = _section(data["units"], "preferences.units")
        chosen: dict[str, str] = {}
        for name, enum_type in UNIT_CHOICES.items():
            if name not in units:
                continue
            allowed = [member.value for member in enum_type]
            if units[name] not in allowed:
                raise ValidationError(
                    f"preferences.units.{name}",
                    f"`{units[name]}` is not a valid {name} unit; "
                    f"expected one of {', '.join(allowed)}",
                )
            chosen[name] = str(units[name])
        if chosen:
            normalized["units"] = chosen

    if "language" in data:
        language = data["language"]
        if not isinstance(language, str):
            raise ValidationError(
                "preferences.language", "preferences.language must be a string"
            )
        normalized["language"] = language

    return normalized


def coerce_text(name: str, value: Any) -> str:
    """Accept strings, cast numbers to text, reject everything else."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValidationError(name, f"{name} must be a string")


def strip_immutable_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Drop the owning key, record id and timestamps from an update body."""
    return {
        name: value
        for name, value in fields.items()
        if name not in IMMUTABLE_PROFILE_FIELDS
    }


def validate_profile_changes(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Turn an update body into validated profile changes.

    Fields the profile does not have are ignored. A null resets a field to
    its default; for ``preferences`` that clears every stored choice.
    """
    changes: dict[str, Any] = {}
    for name, default in PROFILE_TEXT_DEFAULTS.items():
        if name not in fields:
            continue
        value = fields[name]
        changes[name] = default if value is None else coerce_text(name, value)
    if "preferences" in fields:
        value = fields["preferences"]
        changes["preferences"] = {} if value is None else normalize_preferences(value)
    return changes
