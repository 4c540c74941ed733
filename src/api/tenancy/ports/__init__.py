"""Ports for the tenancy bounded context."""

from tenancy.ports.connector import ITenantConnector
from tenancy.ports.exceptions import UnauthenticatedError
from tenancy.ports.repositories import IUserProfileRepository

__all__ = [
    "ITenantConnector",
    "IUserProfileRepository",
    "UnauthenticatedError",
]
