"""Connector protocol used by the connection registry.

The registry decides *when* a tenant connection is built and how long it
lives; a connector knows *how* to build, provision and tear one down.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlalchemy import Table

    from tenancy.infrastructure.connection import TenantConnection


@runtime_checkable
class ITenantConnector(Protocol):
    """Builds ready-to-query handles for tenant databases."""

    async def connect(self, database: str) -> TenantConnection:
        """Open a handle on a tenant database and verify it answers.

        Raises:
            DatabaseConnectionError: If the database is unreachable, the
                credentials are rejected or the handshake times out
        """
        ...

    async def register_schemas(
        self, connection: TenantConnection, schemas: Sequence[Table]
    ) -> TenantConnection:
        """Bind record schemas to the handle and make sure their tables exist.

        Tables that already exist are left untouched. Returns the handle
        carrying the registered schemas.

        Raises:
            SchemaRegistrationError: If a table cannot be created for any
                reason other than already existing
        """
        ...

    async def close(self, connection: TenantConnection) -> None:
        """Dispose a handle and its pooled connections."""
        ...
