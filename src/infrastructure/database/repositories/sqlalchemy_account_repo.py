"""SQLAlchemy implementation of Account repository."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.account import ACCOUNT_TEXT_FIELDS, Account
from infrastructure.database.models import AccountModel


class SQLAlchemyAccountRepository:
    """SQLAlchemy implementation of IAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_email(self, email: str) -> Account | None:
        """Get an account by email."""
        stmt = select(AccountModel).where(AccountModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get(self, id: UUID) -> Account | None:
        """Get an account by ID."""
        stmt = select(AccountModel).where(AccountModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def update_fields(self, id: UUID, changes: dict[str, str]) -> Account | None:
        """Set text fields on an existing account. Never inserts."""
        stmt = select(AccountModel).where(AccountModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        for name, value in changes.items():
            if name not in ACCOUNT_TEXT_FIELDS:
                raise ValueError(f"Account field {name} is not updatable")
            setattr(model, name, value)

        await self._session.flush()
        return self._to_entity(model)

    async def count(self) -> int:
        """Get the number of stored accounts."""
        stmt = select(func.count()).select_from(AccountModel)
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    @staticmethod
    def _to_entity(model: AccountModel) -> Account:
        return Account(
            id=model.id,
            email=model.email,
            name=model.name or "",
            avatar=model.avatar or "",
            image=model.image or "",
            organization=model.organization or "",
            phone=model.phone or "",
            role=model.role,
            is_profile_complete=bool(model.is_profile_complete),
            last_login=model.last_login,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
