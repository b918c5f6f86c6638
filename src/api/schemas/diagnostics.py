"""Pydantic schemas for liveness and diagnostic endpoints."""

from pydantic import BaseModel


class PingResponse(BaseModel):
    """Liveness response."""

    message: str
    version: str
    timestamp: str
    environment: str


class DebugTokenResponse(BaseModel):
    """Identifier resolved from the bearer token."""

    identifier: str
    claim: str


class DebugDatabaseResponse(BaseModel):
    """Connection status and record counts."""

    status: str
    database: str
    collections: dict[str, int]
