"""Infrastructure adapters for the tenancy bounded context."""

from tenancy.infrastructure.connection import TenantConnection
from tenancy.infrastructure.postgres_connector import PostgresTenantConnector
from tenancy.infrastructure.user_profile_repository import UserProfileRepository

__all__ = [
    "PostgresTenantConnector",
    "TenantConnection",
    "UserProfileRepository",
]
