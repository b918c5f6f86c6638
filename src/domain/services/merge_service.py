"""Merged account + profile service."""

from typing import Any, Callable
from uuid import UUID

import structlog

from core.exceptions import AccountNotFoundError
from domain.entities.account import Account
from domain.entities.merged import MergedProfile, merge_view, partition_merged_update
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.profile_service import get_or_create_profile, upsert_profile

logger = structlog.get_logger()


def _as_record_id(identifier: str) -> UUID | None:
    """Interpret a non-email identifier as an internal account id."""
    if "@" in identifier:
        return None
    try:
        return UUID(identifier)
    except ValueError:
        return None


async def resolve_account(uow: IUnitOfWork, identifier: str) -> Account:
    """Find the account for a token identifier.

    The identifier is tried as an email first. Identifiers that are not
    email-shaped but parse as a UUID are then tried as the record id.

    Raises:
        AccountNotFoundError: If neither lookup matches.
    """
    account = await uow.accounts.get_by_email(identifier)
    if account:
        return account

    record_id = _as_record_id(identifier)
    if record_id is not None:
        account = await uow.accounts.get(record_id)
        if account:
            return account

    raise AccountNotFoundError(identifier)


class MergeService:
    """Reads and writes the combined account + profile view.

    The profile is always keyed by the account's email, whatever form of
    identifier the token carried.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_merged(self, identifier: str) -> MergedProfile:
        """Return the merged view, provisioning the profile if needed."""
        async with self._uow_factory() as uow:
            account = await resolve_account(uow, identifier)
            profile = await get_or_create_profile(uow, account.email)
            return merge_view(account, profile)

    async def update_merged(self, identifier: str, body: dict[str, Any]) -> MergedProfile:
        """Update account and profile fields from one body, in one transaction.

        Raises:
            AccountNotFoundError: If the account does not exist (it is never
                created here).
            ValidationError: If preferences carry an invalid unit. Checked
                after the account lookup and before any write.
        """
        async with self._uow_factory() as uow:
            account = await resolve_account(uow, identifier)
            update = partition_merged_update(body)

            # Profile first: a lost create race rolls back, and nothing else is written yet.
            profile = await upsert_profile(uow, account.email, update.profile_changes)

            if update.account_changes:
                updated = await uow.accounts.update_fields(account.id, update.account_changes)
                if updated is None:
                    raise AccountNotFoundError(identifier)
                account = updated

            await uow.commit()

        logger.info(
            "merged_profile_updated",
            account_fields=sorted(update.account_changes),
            profile_fields=sorted(update.profile_changes),
        )
        return merge_view(account, profile)
