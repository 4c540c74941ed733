"""Tenant resolution: from an authenticated user to a ready tenant connection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tenancy.application.observability import (
    DefaultTenantResolverProbe,
    TenantResolverProbe,
)
from tenancy.application.single_flight import SingleFlight
from tenancy.domain.value_objects import TenantDatabaseName, UserId
from tenancy.ports.exceptions import UnauthenticatedError

if TYPE_CHECKING:
    from tenancy.application.registry import ConnectionRegistry
    from tenancy.infrastructure.connection import TenantConnection
    from tenancy.ports.repositories import IUserProfileRepository


class TenantResolver:
    """Resolves a user's tenant database name and its registry handle.

    Naming precedence:
        1. The profile's stored ``tenant_db_name``, normalized to carry the prefix.
        2. ``<prefix><user id>`` when no name is stored or no profile exists.

    A tenant database name never changes for the lifetime of an account, so
    resolved names are cached per user. Concurrent first requests for one
    user share a single profile read; a failed read is not cached.
    """

    def __init__(
        self,
        profiles: IUserProfileRepository,
        registry: ConnectionRegistry,
        database_prefix: str,
        probe: TenantResolverProbe | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            profiles: Control-plane profile lookup
            registry: Process-wide tenant connection registry
            database_prefix: Prefix every tenant database name carries
            probe: Optional domain probe for observability
        """
        self._profiles = profiles
        self._registry = registry
        self._prefix = database_prefix
        self._probe = probe or DefaultTenantResolverProbe()
        self._names: dict[str, TenantDatabaseName] = {}
        self._lookups: SingleFlight[str, TenantDatabaseName] = SingleFlight()

    async def resolve(self, user_id: str | None) -> TenantConnection:
        """Resolve an authenticated user to their ready tenant connection.

        The registry is keyed by the resolved database name, so two users
        whose names normalize to the same database share one connection.

        Raises:
            UnauthenticatedError: If ``user_id`` is missing
            InvalidTenantDatabaseNameError: If the account maps to no valid
                database name
            DatabaseConnectionError: If the tenant database is unreachable
            SchemaRegistrationError: If the record tables cannot be created
        """
        database = await self.resolve_database_name(user_id)
        return await self._registry.acquire(database)

    async def resolve_database_name(self, user_id: str | None) -> TenantDatabaseName:
        """Resolve the tenant database name for a user.

        Raises:
            UnauthenticatedError: If ``user_id`` is missing
            InvalidTenantDatabaseNameError: If the stored or derived name is
                empty or too long
        """
        if user_id is None or not user_id.strip():
            self._probe.identity_missing()
            raise UnauthenticatedError("No authenticated user")

        uid = UserId.from_string(user_id)

        cached = self._names.get(uid.value)
        if cached is not None:
            return cached

        return await self._lookups.do(uid.value, lambda: self._lookup(uid))

    async def _lookup(self, user_id: UserId) -> TenantDatabaseName:
        try:
            profile = await self._profiles.get_by_id(user_id)
        except Exception as e:
            self._probe.profile_lookup_failed(user_id.value, e)
            raise

        if profile is not None and profile.tenant_db_name:
            database = TenantDatabaseName.normalize(profile.tenant_db_name, self._prefix)
            source = "profile"
        else:
            database = TenantDatabaseName.derive(user_id, self._prefix)
            source = "derived"

        self._names[user_id.value] = database
        self._probe.database_name_resolved(user_id.value, database.value, source)
        return database
