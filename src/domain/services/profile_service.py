"""Profile service layer with business logic."""

from typing import Any, Callable

import structlog

from core.exceptions import DuplicateKeyError, ProfileNotFoundError
from domain.entities.profile import (
    Profile,
    strip_immutable_fields,
    validate_profile_changes,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


async def get_or_create_profile(uow: IUnitOfWork, user_id: str) -> Profile:
    """Fetch the profile owned by ``user_id``, creating it with defaults if absent.

    A concurrent request may create the same profile between our read and
    our insert. The unique index rejects the second insert; we roll back
    and return the winner's record instead of failing.
    """
    profile = await uow.profiles.get_by_user_id(user_id)
    if profile:
        return profile

    try:
        created = await uow.profiles.create(Profile(user_id=user_id))
        await uow.commit()
    except DuplicateKeyError:
        await uow.rollback()
        logger.info("profile_create_race_recovered", user_id=user_id)
        existing = await uow.profiles.get_by_user_id(user_id)
        if existing is None:
            raise ProfileNotFoundError(user_id)
        return existing

    logger.info("profile_provisioned", user_id=user_id)
    return created


async def upsert_profile(
    uow: IUnitOfWork, user_id: str, changes: dict[str, Any]
) -> Profile:
    """Upsert within the caller's transaction, replaying once after a create race.

    The caller commits. A lost race rolls the transaction back, so callers
    must not have written anything before this in the same unit of work.
    """
    try:
        return await uow.profiles.upsert(user_id, changes)
    except DuplicateKeyError:
        await uow.rollback()
        logger.info("profile_upsert_race_recovered", user_id=user_id)
        return await uow.profiles.upsert(user_id, changes)


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_or_create(self, user_id: str) -> Profile:
        """Get the profile for an identity key, provisioning it on first access."""
        async with self._uow_factory() as uow:
            return await get_or_create_profile(uow, user_id)

    async def update(self, user_id: str, fields: dict[str, Any]) -> Profile:
        """Partially update the profile, creating it if needed.

        The owning key, record id and timestamps are dropped from ``fields``
        rather than rejected.

        Raises:
            ValidationError: If a field has the wrong type or a unit is not
                one of its allowed values.
        """
        changes = validate_profile_changes(strip_immutable_fields(fields))
        async with self._uow_factory() as uow:
            profile = await upsert_profile(uow, user_id, changes)
            await uow.commit()
            return profile
