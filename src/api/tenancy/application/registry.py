"""Process-wide registry of per-tenant database connections.

Constructed once in the application lifespan and shared by reference with
every request. It is the only owner of tenant connection handles.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

from tenancy.application.observability import (
    ConnectionRegistryProbe,
    DefaultConnectionRegistryProbe,
)
from tenancy.application.single_flight import SingleFlight

if TYPE_CHECKING:
    from sqlalchemy import Table

    from tenancy.domain.value_objects import TenantDatabaseName
    from tenancy.infrastructure.connection import TenantConnection
    from tenancy.ports.connector import ITenantConnector


class ConnectionRegistry:
    """Cache of ready tenant connections keyed by tenant database name.

    Each key is either absent, pending (one connection attempt in flight,
    shared by every caller that arrives meanwhile) or ready (a handle with
    every record schema registered). Ready handles are kept until ``close``
    at shutdown; there is no TTL and no eviction. A failed attempt leaves no
    entry behind, so the next caller starts a fresh attempt.

    Connecting and schema registration run inside the same shared attempt:
    no caller ever sees a handle whose tables are not yet registered.
    """

    def __init__(
        self,
        connector: ITenantConnector,
        schemas: Sequence[Table],
        probe: ConnectionRegistryProbe | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            connector: Builds, provisions and disposes tenant handles
            schemas: Record tables registered on every new handle, in
                creation order
            probe: Optional domain probe for observability
        """
        self._connector = connector
        self._schemas = tuple(schemas)
        self._probe = probe or DefaultConnectionRegistryProbe()
        self._ready: dict[str, TenantConnection] = {}
        self._attempts: SingleFlight[str, TenantConnection] = SingleFlight()

    def __len__(self) -> int:
        return len(self._ready)

    def __contains__(self, database: object) -> bool:
        return str(database) in self._ready

    def is_ready(self, database: TenantDatabaseName | str) -> bool:
        """Return whether a ready handle is cached for ``database``."""
        return str(database) in self._ready

    def is_pending(self, database: TenantDatabaseName | str) -> bool:
        """Return whether a connection attempt for ``database`` is in flight."""
        return self._attempts.is_pending(str(database))

    def database_names(self) -> list[str]:
        """Names of every tenant database with a ready handle."""
        return sorted(self._ready)

    async def acquire(self, database: TenantDatabaseName | str) -> TenantConnection:
        """Return the ready handle for a tenant database, connecting on first use.

        Args:
            database: Resolved tenant database name (the cache key)

        Returns:
            The cached TenantConnection; the same instance for every caller

        Raises:
            DatabaseConnectionError: If the database cannot be reached
            SchemaRegistrationError: If the record tables cannot be created
        """
        key = str(database)

        connection = self._ready.get(key)
        if connection is not None:
            self._probe.connection_reused(key)
            return connection

        if self._attempts.is_pending(key):
            self._probe.attempt_joined(key)

        return await self._attempts.do(key, lambda: self._establish(key))

    async def _establish(self, key: str) -> TenantConnection:
        self._probe.attempt_started(key)

        try:
            connection = await self._connector.connect(key)
        except asyncio.CancelledError:
            self._probe.attempt_cancelled(key)
            raise
        except Exception as e:
            self._probe.attempt_failed(key, e)
            raise

        try:
            connection = await self._connector.register_schemas(
                connection, self._schemas
            )
        except asyncio.CancelledError:
            # The handle is not cached yet, so nothing else will close it.
            self._probe.attempt_cancelled(key)
            await self._connector.close(connection)
            raise
        except Exception as e:
            self._probe.attempt_failed(key, e)
            await self._connector.close(connection)
            raise

        self._ready[key] = connection
        self._probe.connection_ready(key, table_count=len(self._schemas))
        return connection

    async def close(self) -> None:
        """Dispose every cached handle and cancel attempts in flight.

        Only called at application shutdown.
        """
        await self._attempts.cancel_all()
        connections = list(self._ready.values())
        self._ready.clear()

        for connection in connections:
            await self._connector.close(connection)

        self._probe.registry_closed(connection_count=len(connections))
