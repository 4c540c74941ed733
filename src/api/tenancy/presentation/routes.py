"""HTTP routes exposing the caller's tenant database."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from tenancy.application.registry import ConnectionRegistry
from tenancy.dependencies import get_connection_registry, get_tenant_connection
from tenancy.infrastructure.connection import TenantConnection
from tenancy.presentation.models import TenantStatusResponse

router = APIRouter(
    prefix="/tenant",
    tags=["tenant"],
)


@router.get("")
async def get_tenant_status(
    connection: Annotated[TenantConnection, Depends(get_tenant_connection)],
    registry: Annotated[ConnectionRegistry, Depends(get_connection_registry)],
) -> TenantStatusResponse:
    """Describe the caller's tenant database.

    Resolving the connection provisions the database on first use, so a
    successful response means every record table exists.
    """
    return TenantStatusResponse.from_connection(
        connection, ready=registry.is_ready(connection.database_name)
    )
