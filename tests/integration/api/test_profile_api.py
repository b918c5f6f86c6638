"""Integration tests for the profile API."""

import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from infrastructure.database.models import ProfileModel
from tests.conftest import TEST_EMAIL

DEFAULT_PREFERENCES = {
    "notifications": {
        "emailAlerts": True,
        "criticalOnly": False,
        "dailySummary": True,
        "maintenanceReminders": True,
    },
    "units": {"temperature": "celsius", "distance": "metric"},
    "language": "en",
}


class TestGetProfile:
    """Tests for GET /api/profile."""

    @pytest.mark.asyncio
    async def test_first_access_creates_defaults(self, authenticated_client: AsyncClient):
        response = await authenticated_client.get("/api/profile")

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == TEST_EMAIL
        assert data["bio"] == ""
        assert data["timezone"] == "Africa/Tunis"
        assert data["preferences"] == DEFAULT_PREFERENCES
        assert "createdAt" in data
        assert "updatedAt" in data

    @pytest.mark.asyncio
    async def test_repeated_access_returns_same_record(self, authenticated_client: AsyncClient):
        first = (await authenticated_client.get("/api/profile")).json()
        second = (await authenticated_client.get("/api/profile")).json()

        assert first["id"] == second["id"]

    @pytest.mark.asyncio
    async def test_profile_keyed_by_raw_identifier(self, client: AsyncClient, make_token):
        token = make_token(sub="u1")

        response = await client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["userId"] == "u1"


class TestUpdateProfile:
    """Tests for PUT /api/profile."""

    @pytest.mark.asyncio
    async def test_update_creates_and_applies(self, authenticated_client: AsyncClient):
        response = await authenticated_client.put(
            "/api/profile",
            json={"bio": "Hello", "preferences": {"units": {"temperature": "fahrenheit"}}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == "Hello"
        assert data["preferences"]["units"] == {"temperature": "fahrenheit", "distance": "metric"}
        assert data["preferences"]["notifications"] == DEFAULT_PREFERENCES["notifications"]

    @pytest.mark.asyncio
    async def test_update_ignores_immutable_fields(self, authenticated_client: AsyncClient):
        created = (await authenticated_client.get("/api/profile")).json()

        response = await authenticated_client.put(
            "/api/profile",
            json={
                "userId": "someone-else@example.com",
                "createdAt": "2000-01-01T00:00:00",
                "organization": "Acme",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["userId"] == TEST_EMAIL
        assert data["createdAt"] == created["createdAt"]
        assert data["organization"] == "Acme"

    @pytest.mark.asyncio
    async def test_update_is_idempotent(self, authenticated_client: AsyncClient):
        body = {"phone": "+216 555", "timezone": "UTC"}

        first = (await authenticated_client.put("/api/profile", json=body)).json()
        second = (await authenticated_client.put("/api/profile", json=body)).json()

        first.pop("updatedAt")
        second.pop("updatedAt")
        assert second == first
        assert second["phone"] == "+216 555"
        assert second["timezone"] == "UTC"

    @pytest.mark.asyncio
    async def test_update_persists(self, authenticated_client: AsyncClient):
        await authenticated_client.put("/api/profile", json={"role": "operator"})

        response = await authenticated_client.get("/api/profile")

        assert response.json()["role"] == "operator"

    @pytest.mark.asyncio
    async def test_null_resets_fields_to_defaults(self, authenticated_client: AsyncClient):
        await authenticated_client.put(
            "/api/profile",
            json={"bio": "Hello", "timezone": "UTC", "preferences": {"language": "fr"}},
        )

        response = await authenticated_client.put(
            "/api/profile", json={"bio": None, "timezone": None, "preferences": None}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["bio"] == ""
        assert data["timezone"] == "Africa/Tunis"
        assert data["preferences"] == DEFAULT_PREFERENCES

    @pytest.mark.asyncio
    async def test_invalid_unit_is_rejected(self, authenticated_client: AsyncClient):
        response = await authenticated_client.put(
            "/api/profile", json={"preferences": {"units": {"distance": "furlongs"}}}
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"]["field"] == "preferences.units.distance"

    @pytest.mark.asyncio
    async def test_non_boolean_toggle_is_rejected(self, authenticated_client: AsyncClient):
        response = await authenticated_client.put(
            "/api/profile", json={"preferences": {"notifications": {"emailAlerts": "yes"}}}
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_object_body_is_422(self, authenticated_client: AsyncClient):
        response = await authenticated_client.put("/api/profile", json=["bio"])

        assert response.status_code == 422


class TestProfileAuth:
    """Token handling on the profile routes."""

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, client: AsyncClient):
        response = await client.get("/api/profile")

        assert response.status_code == 401
        assert response.json()["message"] == "Token missing"

    @pytest.mark.asyncio
    async def test_bad_signature_is_403(self, client: AsyncClient):
        from jose import jwt

        token = jwt.encode({"email": TEST_EMAIL}, "wrong-secret", algorithm="HS256")

        response = await client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json()["message"] == "Token invalid"

    @pytest.mark.asyncio
    async def test_garbage_token_is_403(self, client: AsyncClient):
        response = await client.get(
            "/api/profile", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_token_without_identifier_is_400(self, client: AsyncClient, make_token):
        token = make_token(role="admin")

        response = await client.get("/api/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid token payload"


class TestConcurrentProvisioning:
    """Simultaneous first requests for one user."""

    @staticmethod
    async def _profile_rows(session_factory) -> int:
        async with session_factory() as session:
            result = await session.execute(select(func.count()).select_from(ProfileModel))
            return result.scalar_one()

    @pytest.mark.asyncio
    async def test_concurrent_gets_create_one_profile(
        self, authenticated_client: AsyncClient, session_factory
    ):
        responses = await asyncio.gather(
            *(authenticated_client.get("/api/profile") for _ in range(8))
        )

        assert [r.status_code for r in responses] == [200] * 8
        assert len({r.json()["id"] for r in responses}) == 1
        assert await self._profile_rows(session_factory) == 1

    @pytest.mark.asyncio
    async def test_concurrent_puts_create_one_profile(
        self, authenticated_client: AsyncClient, session_factory
    ):
        responses = await asyncio.gather(
            *(
                authenticated_client.put("/api/profile", json={"bio": "Hello"})
                for _ in range(8)
            )
        )

        assert [r.status_code for r in responses] == [200] * 8
        assert len({r.json()["id"] for r in responses}) == 1
        assert await self._profile_rows(session_factory) == 1

        profile = (await authenticated_client.get("/api/profile")).json()
        assert profile["bio"] == "Hello"
