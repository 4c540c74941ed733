"""FastAPI dependencies resolving a request to its tenant database.

The connection registry and tenant resolver are built once in the
application lifespan and stored on ``app.state``; these dependencies only
read them.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.exceptions import DatabaseError
from infrastructure.settings import get_auth_settings
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe
from tenancy.application.registry import ConnectionRegistry
from tenancy.application.resolver import TenantResolver
from tenancy.domain.value_objects import InvalidTenantDatabaseNameError
from tenancy.infrastructure.connection import TenantConnection
from tenancy.ports.exceptions import UnauthenticatedError

bearer_scheme = HTTPBearer(auto_error=False)

_WWW_AUTHENTICATE = {"WWW-Authenticate": "Bearer"}


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator configured from auth settings."""
    settings = get_auth_settings()
    return JWTValidator(
        secret=settings.jwt_secret.get_secret_value(),
        probe=DefaultJWTValidatorProbe(),
        algorithm=settings.jwt_algorithm,
        user_id_claim=settings.user_id_claim,
    )


def get_connection_registry(request: Request) -> ConnectionRegistry:
    """Get the process-wide connection registry built at startup."""
    return request.app.state.connection_registry


def get_tenant_resolver(request: Request) -> TenantResolver:
    """Get the process-wide tenant resolver built at startup."""
    return request.app.state.tenant_resolver


def get_current_user_id(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> str:
    """Authenticate the request's bearer token and return its user id.

    Raises:
        HTTPException 401: If the token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=_WWW_AUTHENTICATE,
        )

    try:
        claims = validator.validate_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers=_WWW_AUTHENTICATE,
        ) from e

    return claims.user_id


async def get_tenant_connection(
    user_id: Annotated[str, Depends(get_current_user_id)],
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
) -> TenantConnection:
    """Resolve the authenticated user to their ready tenant connection.

    Called once per request before any tenant query runs.

    Raises:
        HTTPException 401: If the request has no resolvable identity
        HTTPException 422: If the account cannot map to a tenant database name
        HTTPException 503: If the tenant database is unavailable
    """
    try:
        return await resolver.resolve(user_id)
    except UnauthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers=_WWW_AUTHENTICATE,
        ) from e
    except InvalidTenantDatabaseNameError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Account has no valid tenant database name",
        ) from e
    except DatabaseError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tenant database is temporarily unavailable",
        ) from e


async def get_tenant_session(
    connection: Annotated[TenantConnection, Depends(get_tenant_connection)],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on the caller's tenant database (FastAPI dependency).

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()`.

    Yields:
        AsyncSession bound to the tenant's engine
    """
    async with connection.session() as session:
        yield session
