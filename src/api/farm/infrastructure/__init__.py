"""Persistence for farm records."""

from farm.infrastructure.models import TENANT_SCHEMAS

__all__ = ["TENANT_SCHEMAS"]
