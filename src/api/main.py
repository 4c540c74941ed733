"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farm.infrastructure.models import TENANT_SCHEMAS
from farm.presentation import routes as farm_routes
from infrastructure.database.dependencies import (
    close_control_plane,
    get_control_sessionmaker,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import (
    get_database_settings,
    get_settings,
    get_tenancy_settings,
)
from infrastructure.version import __version__
from tenancy.application.registry import ConnectionRegistry
from tenancy.application.resolver import TenantResolver
from tenancy.infrastructure.postgres_connector import PostgresTenantConnector
from tenancy.infrastructure.user_profile_repository import UserProfileRepository
from tenancy.presentation import routes as tenancy_routes


@asynccontextmanager
async def ai_farm_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - The process-wide tenant connection registry and resolver
    - Disposal of every tenant engine and the control-plane engine on shutdown
    """
    configure_logging(get_settings().log_level)

    tenancy_settings = get_tenancy_settings()
    connector = PostgresTenantConnector(
        get_database_settings(),
        provision_databases=tenancy_settings.provision_databases,
    )
    registry = ConnectionRegistry(connector=connector, schemas=TENANT_SCHEMAS)
    resolver = TenantResolver(
        profiles=UserProfileRepository(get_control_sessionmaker()),
        registry=registry,
        database_prefix=tenancy_settings.database_prefix,
    )

    app.state.connection_registry = registry
    app.state.tenant_resolver = resolver

    try:
        yield
    finally:
        await registry.close()
        await connector.dispose()
        await close_control_plane()


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant farm management API",
        version=__version__,
        debug=settings.debug,
        lifespan=ai_farm_lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(tenancy_routes.router)
    app.include_router(farm_routes.router)

    @app.get("/health")
    def health():
        """Basic health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
