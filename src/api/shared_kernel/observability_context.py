"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events, so that log lines from the resolver, the
    registry and the connector can be correlated for a single request.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        user_id: Identifier of the authenticated user (if applicable).
        tenant_database: Resolved tenant database name (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", user_id="u123")
        probe = DefaultConnectionRegistryProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    tenant_database: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.tenant_database is not None:
            result["tenant_database"] = self.tenant_database
        result.update(self.extra)
        return result

    def with_tenant_database(self, tenant_database: str) -> ObservationContext:
        """Create a new context with the tenant database set."""
        return replace(self, tenant_database=tenant_database)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
