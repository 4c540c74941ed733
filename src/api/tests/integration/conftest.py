"""Integration test fixtures for tenant database tests.

These fixtures require a running PostgreSQL instance whose user may create
databases. Tests are skipped when the cluster cannot be reached.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from ulid import ULID

from farm.infrastructure.models import TENANT_SCHEMAS
from infrastructure.database.engines import create_admin_engine
from infrastructure.settings import DatabaseSettings
from tenancy.application.registry import ConnectionRegistry
from tenancy.infrastructure.postgres_connector import PostgresTenantConnector

TEST_PREFIX = "AI_FARM_user_it_"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        AI_FARM_DB_HOST, AI_FARM_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("AI_FARM_DB_HOST", "localhost"),
        port=int(os.getenv("AI_FARM_DB_PORT", "5432")),
        database=os.getenv("AI_FARM_DB_DATABASE", "ai_farm"),
        username=os.getenv("AI_FARM_DB_USERNAME", "ai_farm"),
        password=SecretStr(os.getenv("AI_FARM_DB_PASSWORD", "ai_farm_dev_password")),
        connect_timeout=3.0,
    )


@pytest_asyncio.fixture
async def connector(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[PostgresTenantConnector, None]:
    """Provide a provisioning connector, skipping if the cluster is down."""
    admin = create_admin_engine(integration_db_settings)
    try:
        async with admin.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        pytest.skip(f"PostgreSQL not available: {e}")
    finally:
        await admin.dispose()

    connector = PostgresTenantConnector(integration_db_settings)
    yield connector
    await connector.dispose()


@pytest_asyncio.fixture
async def registry(
    connector: PostgresTenantConnector,
) -> AsyncGenerator[ConnectionRegistry, None]:
    """Provide a registry that closes every tenant engine afterwards."""
    registry = ConnectionRegistry(connector=connector, schemas=TENANT_SCHEMAS)
    yield registry
    await registry.close()


@pytest_asyncio.fixture
async def tenant_databases(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[list[str], None]:
    """Hand out unique tenant database names and drop them afterwards.

    Tests append the names they create to the returned list.
    """
    names: list[str] = []
    yield names

    admin = create_admin_engine(integration_db_settings)
    try:
        async with admin.connect() as conn:
            for name in names:
                quoted = admin.dialect.identifier_preparer.quote_identifier(name)
                await conn.execute(text(f"DROP DATABASE IF EXISTS {quoted} WITH (FORCE)"))
    finally:
        await admin.dispose()


@pytest.fixture
def new_tenant_name(tenant_databases: list[str]):
    """Return a factory producing fresh, tracked tenant database names."""

    def _make() -> str:
        name = f"{TEST_PREFIX}{str(ULID()).lower()}"
        tenant_databases.append(name)
        return name

    return _make
