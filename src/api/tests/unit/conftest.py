"""Unit test fixtures with mocked dependencies."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from unittest.mock import MagicMock

import pytest
from sqlalchemy import Table

from tenancy.domain.value_objects import UserId, UserProfile
from tenancy.infrastructure.connection import TenantConnection


class FakeTenantConnector:
    """In-memory ITenantConnector recording every call.

    ``gate`` holds connect() open until set, which lets a test pile up
    concurrent callers behind one attempt. ``register_gate`` does the same
    for register_schemas(). Errors queued in
    ``connect_errors`` / ``register_errors`` are raised by successive calls.
    """

    def __init__(self) -> None:
        self.connect_calls: list[str] = []
        self.register_calls: list[tuple[str, tuple[str, ...]]] = []
        self.closed: list[str] = []
        self.connect_errors: list[Exception] = []
        self.register_errors: list[Exception] = []
        self.gate: asyncio.Event | None = None
        self.register_gate: asyncio.Event | None = None

    async def connect(self, database: str) -> TenantConnection:
        self.connect_calls.append(database)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.connect_errors:
            raise self.connect_errors.pop(0)
        return TenantConnection(
            database_name=database,
            engine=MagicMock(name=f"engine:{database}"),
            sessionmaker=MagicMock(name=f"sessionmaker:{database}"),
        )

    async def register_schemas(
        self, connection: TenantConnection, schemas: Sequence[Table]
    ) -> TenantConnection:
        self.register_calls.append(
            (connection.database_name, tuple(t.name for t in schemas))
        )
        if self.register_gate is not None:
            await self.register_gate.wait()
        else:
            await asyncio.sleep(0)
        if self.register_errors:
            raise self.register_errors.pop(0)
        return connection.with_tables(schemas)

    async def close(self, connection: TenantConnection) -> None:
        self.closed.append(connection.database_name)


class FakeUserProfileRepository:
    """In-memory IUserProfileRepository counting lookups per user."""

    def __init__(self, profiles: dict[str, str | None] | None = None) -> None:
        self.profiles = dict(profiles or {})
        self.lookups: list[str] = []
        self.errors: list[Exception] = []

    async def get_by_id(self, user_id: UserId) -> UserProfile | None:
        self.lookups.append(user_id.value)
        await asyncio.sleep(0)
        if self.errors:
            raise self.errors.pop(0)
        if user_id.value not in self.profiles:
            return None
        return UserProfile(id=user_id, tenant_db_name=self.profiles[user_id.value])


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def fake_connector() -> FakeTenantConnector:
    """Provide a recording in-memory tenant connector."""
    return FakeTenantConnector()


@pytest.fixture
def fake_profiles() -> FakeUserProfileRepository:
    """Provide an empty in-memory profile repository."""
    return FakeUserProfileRepository()


@pytest.fixture
def tenant_schemas() -> tuple[Table, ...]:
    """Provide the record tables registered on every tenant."""
    from farm.infrastructure.models import TENANT_SCHEMAS

    return TENANT_SCHEMAS
