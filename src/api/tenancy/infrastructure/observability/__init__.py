"""Observability for tenancy infrastructure."""

from tenancy.infrastructure.observability.repository_probe import (
    DefaultUserProfileRepositoryProbe,
    UserProfileRepositoryProbe,
)

__all__ = [
    "DefaultUserProfileRepositoryProbe",
    "UserProfileRepositoryProbe",
]
