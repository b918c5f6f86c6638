"""SQLAlchemy implementation of Profile repository."""

from copy import deepcopy
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateKeyError
from domain.entities.profile import Profile
from infrastructure.database.models import ProfileModel


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_user_id(self, user_id: str) -> Profile | None:
        """Get the profile owned by an identity key."""
        model = await self._get_model(user_id)
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile.

        The unique index on ``user_id`` arbitrates concurrent creates; the
        loser gets :class:`DuplicateKeyError` and must roll back.
        """
        model = self._to_model(profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise DuplicateKeyError(ProfileModel.__tablename__, profile.user_id) from e
        await self._session.refresh(model)
        return self._to_entity(model)

    async def upsert(self, user_id: str, changes: dict[str, Any]) -> Profile:
        """Apply changes to the owned profile, inserting it with defaults if absent."""
        model = await self._get_model(user_id)
        if model is None:
            profile = Profile(user_id=user_id)
            profile.apply(changes)
            return await self.create(profile)

        for name, value in changes.items():
            setattr(model, name, deepcopy(value))

        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def count(self) -> int:
        """Get the number of stored profiles."""
        stmt = select(func.count()).select_from(ProfileModel)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def _get_model(self, user_id: str) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_entity(model: ProfileModel) -> Profile:
        return Profile(
            id=model.id,
            user_id=model.user_id,
            bio=model.bio or "",
            organization=model.organization or "",
            role=model.role or "",
            phone=model.phone or "",
            timezone=model.timezone,
            preferences=deepcopy(model.preferences or {}),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def _to_model(profile: Profile) -> ProfileModel:
        return ProfileModel(
            id=profile.id,
            user_id=profile.user_id,
            bio=profile.bio,
            organization=profile.organization,
            role=profile.role,
            phone=profile.phone,
            timezone=profile.timezone,
            preferences=deepcopy(profile.preferences),
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )
