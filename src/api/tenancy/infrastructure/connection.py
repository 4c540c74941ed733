"""Connection handle for one tenant database."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from sqlalchemy import Table
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


@dataclass(frozen=True, eq=False)
class TenantConnection:
    """Ready-to-query link to one tenant's isolated database.

    Immutable once built: schema registration produces a new handle via
    ``with_tables``. The engine beneath manages its own connection pool, so a
    single handle serves any number of concurrent requests; each request
    opens its own session.

    Attributes:
        database_name: The tenant database this handle points at
        engine: Async engine owning the tenant's connection pool
        sessionmaker: Session factory bound to ``engine``
        tables: Registered record tables by name
    """

    database_name: str
    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]
    tables: Mapping[str, Table] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def open(cls, database_name: str, engine: AsyncEngine) -> TenantConnection:
        """Wrap an engine in a handle with no schemas registered yet."""
        return cls(
            database_name=database_name,
            engine=engine,
            sessionmaker=async_sessionmaker(
                engine,
                expire_on_commit=False,
                class_=AsyncSession,
            ),
        )

    def with_tables(self, tables: Sequence[Table]) -> TenantConnection:
        """Return a copy of this handle with ``tables`` registered."""
        registered = {**self.tables, **{table.name: table for table in tables}}
        return replace(self, tables=MappingProxyType(registered))

    def session(self) -> AsyncSession:
        """Open a new session on the tenant database.

        The session does NOT auto-commit; use ``async with session.begin()``.
        """
        return self.sessionmaker()

    def table(self, name: str) -> Table:
        """Look up a registered record table.

        Raises:
            KeyError: If no table with that name was registered
        """
        return self.tables[name]
