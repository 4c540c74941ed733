"""PostgreSQL connector: one database per tenant on a shared cluster.

This module builds tenant connection handles: it provisions the tenant
database when missing, opens an async engine on it, verifies the handshake,
and creates the record tables.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

from sqlalchemy import Table, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from infrastructure.database.engines import create_admin_engine, create_tenant_engine
from infrastructure.database.exceptions import (
    DatabaseConnectionError,
    SchemaRegistrationError,
)
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)
from tenancy.infrastructure.connection import TenantConnection
from tenancy.ports.connector import ITenantConnector

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from infrastructure.settings import DatabaseSettings

# PostgreSQL SQLSTATE codes
DUPLICATE_DATABASE = "42P04"
DUPLICATE_TABLE = "42P07"
# Concurrent CREATE TABLE or CREATE DATABASE can collide on a catalog index first
UNIQUE_VIOLATION = "23505"

_CONNECT_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


def _sqlstate(error: DBAPIError) -> str | None:
    """Extract the SQLSTATE code from a wrapped driver error."""
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is None and orig is not None:
        code = getattr(orig.__cause__, "sqlstate", None)
    return code


class PostgresTenantConnector(ITenantConnector):
    """Builds tenant handles on a PostgreSQL cluster.

    Tenant databases live next to the control-plane database and are reached
    with the same credentials. The admin engine used for CREATE DATABASE is
    created lazily and reused.
    """

    def __init__(
        self,
        settings: DatabaseSettings,
        provision_databases: bool = True,
        probe: ConnectionProbe | None = None,
    ) -> None:
        """Initialize the connector.

        Args:
            settings: Database cluster settings
            provision_databases: Create tenant databases that do not exist yet
            probe: Optional observability probe
        """
        self._settings = settings
        self._provision_databases = provision_databases
        self._probe = probe or DefaultConnectionProbe()
        self._admin_engine: AsyncEngine | None = None

    async def connect(self, database: str) -> TenantConnection:
        """Open a handle on a tenant database and verify it answers.

        Args:
            database: Resolved tenant database name

        Returns:
            A TenantConnection with no schemas registered yet

        Raises:
            DatabaseConnectionError: If the database cannot be reached or created
        """
        if self._provision_databases:
            await self._ensure_database(database)

        engine = create_tenant_engine(self._settings, database)

        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except _CONNECT_ERRORS as e:
            await engine.dispose()
            self._probe.connection_failed(
                host=self._settings.host,
                database=database,
                error=e,
            )
            raise DatabaseConnectionError(
                f"Failed to connect to tenant database {database}: {e}",
                database=database,
            ) from e
        except asyncio.CancelledError:
            await engine.dispose()
            raise

        self._probe.connection_established(host=self._settings.host, database=database)
        return TenantConnection.open(database, engine)

    async def register_schemas(
        self, connection: TenantConnection, schemas: Sequence[Table]
    ) -> TenantConnection:
        """Create every record table that does not exist yet.

        Each table is created in its own transaction with ``checkfirst``, so
        running this twice, or from two processes at once, leaves exactly one
        table per schema.

        Raises:
            SchemaRegistrationError: If a table cannot be created
        """
        database = connection.database_name

        for table in schemas:
            try:
                async with connection.engine.begin() as conn:
                    await conn.run_sync(table.create, checkfirst=True)
            except DBAPIError as e:
                if _sqlstate(e) in (DUPLICATE_TABLE, UNIQUE_VIOLATION):
                    self._probe.table_already_existed(database, table.name)
                    continue
                self._probe.schema_registration_failed(database, table.name, e)
                raise SchemaRegistrationError(
                    f"Failed to create table {table.name} in {database}: {e}",
                    database=database,
                    table=table.name,
                ) from e
            except _CONNECT_ERRORS as e:
                self._probe.schema_registration_failed(database, table.name, e)
                raise SchemaRegistrationError(
                    f"Failed to create table {table.name} in {database}: {e}",
                    database=database,
                    table=table.name,
                ) from e

            self._probe.table_ensured(database, table.name)

        return connection.with_tables(schemas)

    async def close(self, connection: TenantConnection) -> None:
        """Dispose a tenant handle's engine and pooled connections."""
        await connection.engine.dispose()
        self._probe.engine_disposed(connection.database_name)

    async def dispose(self) -> None:
        """Dispose the admin engine, if one was created."""
        if self._admin_engine is not None:
            await self._admin_engine.dispose()
            self._admin_engine = None

    def _get_admin_engine(self) -> AsyncEngine:
        if self._admin_engine is None:
            self._admin_engine = create_admin_engine(self._settings)
        return self._admin_engine

    async def _ensure_database(self, database: str) -> None:
        """Create the tenant database unless it already exists.

        Raises:
            DatabaseConnectionError: If the cluster is unreachable or refuses
                to create the database
        """
        engine = self._get_admin_engine()
        created = False

        try:
            async with engine.connect() as conn:
                exists = await conn.scalar(
                    text("SELECT 1 FROM pg_database WHERE datname = :name"),
                    {"name": database},
                )
                if not exists:
                    quoted = engine.dialect.identifier_preparer.quote_identifier(
                        database
                    )
                    await conn.execute(text(f"CREATE DATABASE {quoted}"))
                    created = True
        except DBAPIError as e:
            # Another process created it between our check and CREATE
            if _sqlstate(e) in (DUPLICATE_DATABASE, UNIQUE_VIOLATION):
                return
            self._probe.connection_failed(
                host=self._settings.host, database=database, error=e
            )
            raise DatabaseConnectionError(
                f"Failed to provision tenant database {database}: {e}",
                database=database,
            ) from e
        except _CONNECT_ERRORS as e:
            self._probe.connection_failed(
                host=self._settings.host, database=database, error=e
            )
            raise DatabaseConnectionError(
                f"Failed to provision tenant database {database}: {e}",
                database=database,
            ) from e

        if created:
            self._probe.database_provisioned(database)
