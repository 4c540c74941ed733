"""Pydantic models for tenancy API responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tenancy.infrastructure.connection import TenantConnection


class TenantStatusResponse(BaseModel):
    """Response model describing the caller's tenant database."""

    database_name: str = Field(..., description="Resolved tenant database name")
    ready: bool = Field(..., description="Whether the connection is cached and ready")
    tables: list[str] = Field(..., description="Record tables registered on it")

    @classmethod
    def from_connection(
        cls, connection: TenantConnection, ready: bool
    ) -> TenantStatusResponse:
        """Build the response from a tenant connection handle."""
        return cls(
            database_name=connection.database_name,
            ready=ready,
            tables=sorted(connection.tables),
        )
