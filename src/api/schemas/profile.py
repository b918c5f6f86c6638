"""Pydantic schemas for Profile API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from domain.entities.profile import DistanceUnit, Profile, TemperatureUnit


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationPreferencesResponse(CamelModel):
    email_alerts: bool
    critical_only: bool
    daily_summary: bool
    maintenance_reminders: bool


class UnitPreferencesResponse(CamelModel):
    temperature: TemperatureUnit
    distance: DistanceUnit


class PreferencesResponse(CamelModel):
    notifications: NotificationPreferencesResponse
    units: UnitPreferencesResponse
    language: str


class ProfileResponse(CamelModel):
    """Schema for Profile response, with preferences resolved against defaults."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "userId": "ann@example.com",
                "bio": "",
                "organization": "Acme",
                "role": "",
                "phone": "",
                "timezone": "Africa/Tunis",
                "preferences": {
                    "notifications": {
                        "emailAlerts": True,
                        "criticalOnly": False,
                        "dailySummary": True,
                        "maintenanceReminders": True,
                    },
                    "units": {"temperature": "celsius", "distance": "metric"},
                    "language": "en",
                },
                "createdAt": "2026-01-28T10:00:00",
                "updatedAt": "2026-01-28T10:00:00",
            }
        },
    )

    id: UUID
    user_id: str
    bio: str
    organization: str
    role: str
    phone: str
    timezone: str
    preferences: PreferencesResponse
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            bio=profile.bio,
            organization=profile.organization,
            role=profile.role,
            phone=profile.phone,
            timezone=profile.timezone,
            preferences=PreferencesResponse.model_validate(profile.resolved_preferences),
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )
