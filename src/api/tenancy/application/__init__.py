"""Application services for the tenancy bounded context."""

from tenancy.application.registry import ConnectionRegistry
from tenancy.application.resolver import TenantResolver
from tenancy.application.single_flight import SingleFlight

__all__ = [
    "ConnectionRegistry",
    "SingleFlight",
    "TenantResolver",
]
