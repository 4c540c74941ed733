"""Unit tests for TenantResolver."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from infrastructure.database.exceptions import DatabaseConnectionError
from tenancy.application.registry import ConnectionRegistry
from tenancy.application.resolver import TenantResolver
from tenancy.domain.value_objects import InvalidTenantDatabaseNameError
from tenancy.ports.exceptions import UnauthenticatedError

PREFIX = "AI_FARM_user_"


@pytest.fixture
def registry(fake_connector, tenant_schemas) -> ConnectionRegistry:
    return ConnectionRegistry(fake_connector, tenant_schemas, probe=MagicMock())


@pytest.fixture
def probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def resolver(fake_profiles, registry, probe) -> TenantResolver:
    return TenantResolver(
        profiles=fake_profiles,
        registry=registry,
        database_prefix=PREFIX,
        probe=probe,
    )


class TestDatabaseNaming:
    """Tests for how a user's tenant database name is chosen."""

    @pytest.mark.asyncio
    async def test_derives_name_when_profile_has_none(
        self, resolver, fake_profiles, fake_connector
    ):
        """A user without a stored name resolves to prefix + user id."""
        fake_profiles.profiles["u123"] = None

        connection = await resolver.resolve("u123")

        assert connection.database_name == "AI_FARM_user_u123"
        assert fake_connector.connect_calls == ["AI_FARM_user_u123"]

    @pytest.mark.asyncio
    async def test_derives_name_when_profile_missing(self, resolver):
        """An unknown user still resolves to prefix + user id."""
        name = await resolver.resolve_database_name("ghost")

        assert name.value == "AI_FARM_user_ghost"

    @pytest.mark.asyncio
    async def test_stored_prefixed_name_is_used_verbatim(
        self, resolver, fake_profiles
    ):
        fake_profiles.profiles["u1"] = "AI_FARM_user_green_acres"

        name = await resolver.resolve_database_name("u1")

        assert name.value == "AI_FARM_user_green_acres"

    @pytest.mark.asyncio
    async def test_stored_bare_name_gets_prefix(self, resolver, fake_profiles):
        fake_profiles.profiles["u1"] = "green_acres"

        name = await resolver.resolve_database_name("u1")

        assert name.value == "AI_FARM_user_green_acres"

    @pytest.mark.asyncio
    async def test_empty_stored_name_falls_back_to_derivation(
        self, resolver, fake_profiles
    ):
        fake_profiles.profiles["u1"] = ""

        name = await resolver.resolve_database_name("u1")

        assert name.value == "AI_FARM_user_u1"

    @pytest.mark.asyncio
    async def test_probe_records_name_source(self, resolver, fake_profiles, probe):
        fake_profiles.profiles["u1"] = "green_acres"
        fake_profiles.profiles["u2"] = None

        await resolver.resolve_database_name("u1")
        await resolver.resolve_database_name("u2")

        probe.database_name_resolved.assert_any_call(
            "u1", "AI_FARM_user_green_acres", "profile"
        )
        probe.database_name_resolved.assert_any_call("u2", "AI_FARM_user_u2", "derived")


class TestCacheKey:
    """The registry is keyed by the resolved database name."""

    @pytest.mark.asyncio
    async def test_bare_and_prefixed_names_share_one_connection(
        self, resolver, fake_profiles, fake_connector, registry
    ):
        """Two spellings of one database should yield a single handle."""
        fake_profiles.profiles["u1"] = "shared"
        fake_profiles.profiles["u2"] = "AI_FARM_user_shared"

        first = await resolver.resolve("u1")
        second = await resolver.resolve("u2")

        assert first is second
        assert fake_connector.connect_calls == ["AI_FARM_user_shared"]
        assert registry.database_names() == ["AI_FARM_user_shared"]

    @pytest.mark.asyncio
    async def test_distinct_users_get_distinct_connections(
        self, resolver, fake_connector
    ):
        first = await resolver.resolve("alice")
        second = await resolver.resolve("bob")

        assert first is not second
        assert sorted(fake_connector.connect_calls) == [
            "AI_FARM_user_alice",
            "AI_FARM_user_bob",
        ]


class TestMissingIdentity:
    """Resolution without an authenticated user fails before any I/O."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [None, "", "   "])
    async def test_raises_unauthenticated(
        self, resolver, fake_profiles, fake_connector, probe, user_id
    ):
        with pytest.raises(UnauthenticatedError):
            await resolver.resolve(user_id)

        assert fake_profiles.lookups == []
        assert fake_connector.connect_calls == []
        probe.identity_missing.assert_called_once()


class TestInvalidDatabaseNames:
    """Accounts whose name cannot fit a PostgreSQL identifier fail cleanly."""

    @pytest.mark.asyncio
    async def test_overlong_user_id_raises_domain_error(
        self, resolver, fake_profiles, fake_connector
    ):
        with pytest.raises(InvalidTenantDatabaseNameError):
            await resolver.resolve("u" * 64)

        assert fake_connector.connect_calls == []

        with pytest.raises(InvalidTenantDatabaseNameError):
            await resolver.resolve("u" * 64)

        assert fake_profiles.lookups == ["u" * 64, "u" * 64]

    @pytest.mark.asyncio
    async def test_overlong_stored_name_raises_domain_error(
        self, resolver, fake_profiles, fake_connector
    ):
        fake_profiles.profiles["u1"] = "x" * 60

        with pytest.raises(InvalidTenantDatabaseNameError):
            await resolver.resolve("u1")

        assert fake_connector.connect_calls == []

    @pytest.mark.asyncio
    async def test_other_users_unaffected(self, resolver):
        with pytest.raises(InvalidTenantDatabaseNameError):
            await resolver.resolve("u" * 64)

        connection = await resolver.resolve("u1")

        assert connection.database_name == "AI_FARM_user_u1"


class TestProfileLookups:
    """Profile reads are shared and cached, failures are not."""

    @pytest.mark.asyncio
    async def test_concurrent_first_requests_read_profile_once(
        self, resolver, fake_profiles, fake_connector
    ):
        fake_profiles.profiles["u1"] = None

        results = await asyncio.gather(*(resolver.resolve("u1") for _ in range(10)))

        assert fake_profiles.lookups == ["u1"]
        assert fake_connector.connect_calls == ["AI_FARM_user_u1"]
        assert all(r is results[0] for r in results)

    @pytest.mark.asyncio
    async def test_resolved_name_is_cached(self, resolver, fake_profiles):
        await resolver.resolve_database_name("u1")
        await resolver.resolve_database_name("u1")

        assert fake_profiles.lookups == ["u1"]

    @pytest.mark.asyncio
    async def test_whitespace_around_user_id_is_ignored(self, resolver, fake_profiles):
        first = await resolver.resolve_database_name("u1")
        second = await resolver.resolve_database_name("  u1 ")

        assert first == second
        assert fake_profiles.lookups == ["u1"]

    @pytest.mark.asyncio
    async def test_failed_lookup_is_not_cached(self, resolver, fake_profiles, probe):
        error = DatabaseConnectionError("control plane down")
        fake_profiles.errors.append(error)

        with pytest.raises(DatabaseConnectionError):
            await resolver.resolve("u1")

        probe.profile_lookup_failed.assert_called_once_with("u1", error)

        connection = await resolver.resolve("u1")

        assert connection.database_name == "AI_FARM_user_u1"
        assert fake_profiles.lookups == ["u1", "u1"]

    @pytest.mark.asyncio
    async def test_connection_failure_keeps_name_but_retries_connect(
        self, resolver, fake_profiles, fake_connector
    ):
        """A tenant connect failure should not force another profile read."""
        fake_connector.connect_errors.append(DatabaseConnectionError("down"))

        with pytest.raises(DatabaseConnectionError):
            await resolver.resolve("u1")

        await resolver.resolve("u1")

        assert fake_profiles.lookups == ["u1"]
        assert len(fake_connector.connect_calls) == 2
