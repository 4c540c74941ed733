"""Domain probe for user profile repository operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserProfileRepositoryProbe(Protocol):
    """Domain probe for user profile repository operations."""

    def profile_retrieved(self, user_id: str) -> None:
        """Record that a profile was retrieved."""
        ...

    def profile_not_found(self, user_id: str) -> None:
        """Record that no profile exists for a user."""
        ...

    def with_context(self, context: ObservationContext) -> UserProfileRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserProfileRepositoryProbe:
    """Default implementation of UserProfileRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        kwargs = self._context.as_dict()
        kwargs.pop("user_id", None)
        return kwargs

    def with_context(
        self, context: ObservationContext
    ) -> DefaultUserProfileRepositoryProbe:
        return DefaultUserProfileRepositoryProbe(logger=self._logger, context=context)

    def profile_retrieved(self, user_id: str) -> None:
        self._logger.debug(
            "user_profile_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def profile_not_found(self, user_id: str) -> None:
        self._logger.info(
            "user_profile_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )
