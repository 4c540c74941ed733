"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for tenant database connection observability.

    This probe captures domain-significant events related to per-tenant
    database connections without exposing logging implementation details.
    Hosts and database names are logged; credentials never are.
    """

    def connection_established(self, host: str, database: str) -> None:
        """Record that a database connection was successfully established."""
        ...

    def connection_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that a database connection attempt failed."""
        ...

    def database_provisioned(self, database: str) -> None:
        """Record that a missing tenant database was created."""
        ...

    def table_ensured(self, database: str, table: str) -> None:
        """Record that a record table exists on the tenant database."""
        ...

    def table_already_existed(self, database: str, table: str) -> None:
        """Record that table creation raced with another creator."""
        ...

    def schema_registration_failed(
        self, database: str, table: str, error: Exception
    ) -> None:
        """Record that a record table could not be created."""
        ...

    def engine_disposed(self, database: str) -> None:
        """Record that a tenant engine and its pool were closed."""
        ...

    def control_plane_closed(self) -> None:
        """Record that the control-plane engine was closed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def connection_established(self, host: str, database: str) -> None:
        """Record that a database connection was successfully established."""
        self._logger.info(
            "tenant_connection_established",
            host=host,
            database=database,
            **self._get_context_kwargs(),
        )

    def connection_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that a database connection attempt failed."""
        self._logger.error(
            "tenant_connection_failed",
            host=host,
            database=database,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def database_provisioned(self, database: str) -> None:
        """Record that a missing tenant database was created."""
        self._logger.info(
            "tenant_database_provisioned",
            database=database,
            **self._get_context_kwargs(),
        )

    def table_ensured(self, database: str, table: str) -> None:
        """Record that a record table exists on the tenant database."""
        self._logger.debug(
            "tenant_table_ensured",
            database=database,
            table=table,
            **self._get_context_kwargs(),
        )

    def table_already_existed(self, database: str, table: str) -> None:
        """Record that table creation raced with another creator."""
        self._logger.debug(
            "tenant_table_already_existed",
            database=database,
            table=table,
            **self._get_context_kwargs(),
        )

    def schema_registration_failed(
        self, database: str, table: str, error: Exception
    ) -> None:
        """Record that a record table could not be created."""
        self._logger.error(
            "tenant_schema_registration_failed",
            database=database,
            table=table,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def engine_disposed(self, database: str) -> None:
        """Record that a tenant engine and its pool were closed."""
        self._logger.info(
            "tenant_engine_disposed",
            database=database,
            **self._get_context_kwargs(),
        )

    def control_plane_closed(self) -> None:
        """Record that the control-plane engine was closed."""
        self._logger.info(
            "control_plane_engine_closed",
            **self._get_context_kwargs(),
        )
