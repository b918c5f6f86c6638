"""Database and service dependencies."""

from typing import Annotated, Callable

from fastapi import Depends, Request

from domain.services.merge_service import MergeService
from domain.services.profile_service import ProfileService
from infrastructure.database.connection import DatabaseConnection
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

UowFactory = Callable[[], SQLAlchemyUnitOfWork]


def get_database(request: Request) -> DatabaseConnection:
    """Get the database handle owned by the application."""
    return request.app.state.database  # type: ignore[no-any-return]


Database = Annotated[DatabaseConnection, Depends(get_database)]


async def get_uow_factory(database: Database) -> UowFactory:
    """Connect on first use, then hand out Unit of Work instances."""
    session_factory = await database.ensure_connected()

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(session_factory)

    return factory


async def get_profile_service(
    uow_factory: UowFactory = Depends(get_uow_factory),
) -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(uow_factory)


async def get_merge_service(
    uow_factory: UowFactory = Depends(get_uow_factory),
) -> MergeService:
    """Get Merge service instance."""
    return MergeService(uow_factory)
