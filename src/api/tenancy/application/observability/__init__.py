"""Observability for tenancy application services."""

from tenancy.application.observability.registry_probe import (
    ConnectionRegistryProbe,
    DefaultConnectionRegistryProbe,
)
from tenancy.application.observability.resolver_probe import (
    DefaultTenantResolverProbe,
    TenantResolverProbe,
)

__all__ = [
    "ConnectionRegistryProbe",
    "DefaultConnectionRegistryProbe",
    "DefaultTenantResolverProbe",
    "TenantResolverProbe",
]
