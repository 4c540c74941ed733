"""PostgreSQL implementation of IUserProfileRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.exceptions import DatabaseConnectionError
from tenancy.domain.value_objects import UserId, UserProfile
from tenancy.infrastructure.models import UserProfileModel
from tenancy.infrastructure.observability.repository_probe import (
    DefaultUserProfileRepositoryProbe,
    UserProfileRepositoryProbe,
)
from tenancy.ports.repositories import IUserProfileRepository


class UserProfileRepository(IUserProfileRepository):
    """Control-plane profile lookup.

    Lives for the whole process alongside the tenant resolver, so it holds a
    session factory and opens a short-lived session per lookup rather than
    borrowing a request's session.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        probe: UserProfileRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a control-plane session factory and probe.

        Args:
            sessionmaker: Factory for control-plane sessions
            probe: Optional domain probe for observability
        """
        self._sessionmaker = sessionmaker
        self._probe = probe or DefaultUserProfileRepositoryProbe()

    async def get_by_id(self, user_id: UserId) -> UserProfile | None:
        """Retrieve a user's profile by their ID.

        Args:
            user_id: The account identifier

        Returns:
            The UserProfile, or None if not found

        Raises:
            DatabaseConnectionError: If the control-plane database cannot be read
        """
        stmt = select(UserProfileModel).where(UserProfileModel.id == user_id.value)

        try:
            async with self._sessionmaker() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise DatabaseConnectionError(
                f"Failed to read user profile: {e}"
            ) from e

        if model is None:
            self._probe.profile_not_found(user_id.value)
            return None

        self._probe.profile_retrieved(user_id.value)
        return UserProfile(
            id=UserId(value=model.id),
            tenant_db_name=model.tenant_db_name,
        )
