"""Domain probe for the tenant connection registry.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events of the per-tenant connection lifecycle.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionRegistryProbe(Protocol):
    """Domain probe for connection registry operations."""

    def connection_reused(self, database: str) -> None:
        """Record that a cached ready connection was handed out."""
        ...

    def attempt_joined(self, database: str) -> None:
        """Record that a caller is waiting on an attempt already in flight."""
        ...

    def attempt_started(self, database: str) -> None:
        """Record that a new connection attempt started."""
        ...

    def connection_ready(self, database: str, table_count: int) -> None:
        """Record that a connection is ready and cached."""
        ...

    def attempt_failed(self, database: str, error: Exception) -> None:
        """Record that a connection attempt failed and its entry was purged."""
        ...

    def attempt_cancelled(self, database: str) -> None:
        """Record that a connection attempt was cancelled before it finished."""
        ...

    def registry_closed(self, connection_count: int) -> None:
        """Record that the registry disposed every cached connection."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionRegistryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionRegistryProbe:
    """Default implementation of ConnectionRegistryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultConnectionRegistryProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionRegistryProbe(logger=self._logger, context=context)

    def connection_reused(self, database: str) -> None:
        """Record that a cached ready connection was handed out."""
        self._logger.debug(
            "tenant_connection_reused",
            database=database,
            **self._get_context_kwargs(),
        )

    def attempt_joined(self, database: str) -> None:
        """Record that a caller is waiting on an attempt already in flight."""
        self._logger.debug(
            "tenant_connection_attempt_joined",
            database=database,
            **self._get_context_kwargs(),
        )

    def attempt_started(self, database: str) -> None:
        """Record that a new connection attempt started."""
        self._logger.info(
            "tenant_connection_attempt_started",
            database=database,
            **self._get_context_kwargs(),
        )

    def connection_ready(self, database: str, table_count: int) -> None:
        """Record that a connection is ready and cached."""
        self._logger.info(
            "tenant_connection_ready",
            database=database,
            table_count=table_count,
            **self._get_context_kwargs(),
        )

    def attempt_failed(self, database: str, error: Exception) -> None:
        """Record that a connection attempt failed and its entry was purged."""
        self._logger.error(
            "tenant_connection_attempt_failed",
            database=database,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def attempt_cancelled(self, database: str) -> None:
        self._logger.info(
            "tenant_connection_attempt_cancelled",
            database=database,
            **self._get_context_kwargs(),
        )

    def registry_closed(self, connection_count: int) -> None:
        """Record that the registry disposed every cached connection."""
        self._logger.info(
            "tenant_connection_registry_closed",
            connection_count=connection_count,
            **self._get_context_kwargs(),
        )
