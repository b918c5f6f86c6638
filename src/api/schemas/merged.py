"""Pydantic schemas for the merged account + profile view."""

from dataclasses import asdict
from typing import Any

from pydantic import BaseModel, ConfigDict

from domain.entities.merged import MergedProfile


class MergedProfileResponse(BaseModel):
    """Identity fields from the account, settings from the profile."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "ann@example.com",
                "name": "Ann",
                "avatar": "",
                "image": "",
                "organization": "Acme",
                "phone": "",
                "timezone": "UTC",
                "preferences": {},
            }
        },
    )

    email: str
    name: str
    avatar: str
    image: str
    organization: str
    phone: str
    timezone: str
    preferences: dict[str, Any]

    @classmethod
    def from_entity(cls, merged: MergedProfile) -> "MergedProfileResponse":
        return cls(**asdict(merged))
