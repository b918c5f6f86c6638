"""Unit tests for ProfileService."""

import pytest

from core.exceptions import DuplicateKeyError, ProfileNotFoundError, ValidationError
from domain.entities.profile import Profile
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow)


# --- get_or_create ---


class TestGetOrCreate:
    @pytest.mark.asyncio
    async def test_returns_existing_profile(self, service: ProfileService, uow: FakeUnitOfWork):
        existing = Profile(user_id="ann@example.com", bio="hi")
        uow.profiles.get_by_user_id.return_value = existing

        result = await service.get_or_create("ann@example.com")

        assert result is existing
        uow.profiles.create.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_creates_profile_with_defaults(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get_by_user_id.return_value = None
        uow.profiles.create.side_effect = lambda profile: profile

        result = await service.get_or_create("ann@example.com")

        assert result.user_id == "ann@example.com"
        assert result.timezone == "Africa/Tunis"
        assert result.preferences == {}
        assert uow.committed

    @pytest.mark.asyncio
    async def test_recovers_from_duplicate_key_race(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        winner = Profile(user_id="ann@example.com")
        uow.profiles.get_by_user_id.side_effect = [None, winner]
        uow.profiles.create.side_effect = DuplicateKeyError("user_profiles", "ann@example.com")

        result = await service.get_or_create("ann@example.com")

        assert result is winner
        assert uow.rolled_back
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_raises_when_race_winner_vanished(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        uow.profiles.get_by_user_id.side_effect = [None, None]
        uow.profiles.create.side_effect = DuplicateKeyError("user_profiles", "ann@example.com")

        with pytest.raises(ProfileNotFoundError):
            await service.get_or_create("ann@example.com")


# --- update ---


class TestUpdate:
    @pytest.mark.asyncio
    async def test_applies_partial_update(self, service: ProfileService, uow: FakeUnitOfWork):
        updated = Profile(user_id="ann@example.com", bio="new bio")
        uow.profiles.upsert.return_value = updated

        result = await service.update("ann@example.com", {"bio": "new bio"})

        assert result is updated
        uow.profiles.upsert.assert_called_once_with("ann@example.com", {"bio": "new bio"})
        assert uow.committed

    @pytest.mark.asyncio
    async def test_drops_immutable_fields(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.upsert.return_value = Profile(user_id="ann@example.com")

        await service.update(
            "ann@example.com",
            {
                "userId": "mallory@example.com",
                "_id": "x",
                "createdAt": "2000-01-01T00:00:00",
                "updatedAt": "2000-01-01T00:00:00",
                "timezone": "UTC",
            },
        )

        uow.profiles.upsert.assert_called_once_with("ann@example.com", {"timezone": "UTC"})

    @pytest.mark.asyncio
    async def test_invalid_unit_is_rejected_before_writing(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        with pytest.raises(ValidationError):
            await service.update(
                "ann@example.com", {"preferences": {"units": {"temperature": "kelvin"}}}
            )

        uow.profiles.upsert.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_replays_upsert_after_create_race(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        updated = Profile(user_id="ann@example.com", phone="123")
        uow.profiles.upsert.side_effect = [
            DuplicateKeyError("user_profiles", "ann@example.com"),
            updated,
        ]

        result = await service.update("ann@example.com", {"phone": "123"})

        assert result is updated
        assert uow.profiles.upsert.call_count == 2
        assert uow.rolled_back
        assert uow.committed
