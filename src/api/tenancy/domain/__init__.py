"""Tenancy domain layer."""

from tenancy.domain.value_objects import (
    InvalidTenantDatabaseNameError,
    TenantDatabaseName,
    UserId,
    UserProfile,
)

__all__ = [
    "InvalidTenantDatabaseNameError",
    "TenantDatabaseName",
    "UserId",
    "UserProfile",
]
