"""Domain probe for tenant database name resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantResolverProbe(Protocol):
    """Domain probe for tenant resolution operations."""

    def database_name_resolved(self, user_id: str, database: str, source: str) -> None:
        """Record that a user's tenant database name was resolved.

        ``source`` is "profile" for a stored name, "derived" for the fallback.
        """
        ...

    def profile_lookup_failed(self, user_id: str, error: Exception) -> None:
        """Record that reading the user's profile failed."""
        ...

    def identity_missing(self) -> None:
        """Record that a request reached tenant resolution without a user id."""
        ...

    def with_context(self, context: ObservationContext) -> TenantResolverProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantResolverProbe:
    """Default implementation of TenantResolverProbe using structlog."""

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
        # user_id is always passed explicitly by the events below
        kwargs = self._context.as_dict()
        kwargs.pop("user_id", None)
        return kwargs

    def with_context(self, context: ObservationContext) -> DefaultTenantResolverProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantResolverProbe(logger=self._logger, context=context)

    def database_name_resolved(self, user_id: str, database: str, source: str) -> None:
        self._logger.debug(
            "tenant_database_name_resolved",
            user_id=user_id,
            database=database,
            source=source,
            **self._get_context_kwargs(),
        )

    def profile_lookup_failed(self, user_id: str, error: Exception) -> None:
        self._logger.error(
            "tenant_profile_lookup_failed",
            user_id=user_id,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def identity_missing(self) -> None:
        self._logger.warning(
            "tenant_identity_missing",
            **self._get_context_kwargs(),
        )
