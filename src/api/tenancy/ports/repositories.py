"""Repository protocols (ports) for the tenancy bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tenancy.domain.value_objects import UserId, UserProfile


@runtime_checkable
class IUserProfileRepository(Protocol):
    """Read access to user profiles in the control-plane database."""

    async def get_by_id(self, user_id: UserId) -> UserProfile | None:
        """Retrieve a user's profile.

        Args:
            user_id: The account identifier

        Returns:
            The UserProfile, or None if no profile exists
        """
        ...
