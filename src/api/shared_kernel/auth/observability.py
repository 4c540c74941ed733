"""Domain probe for bearer token validation.

Every tenant request starts with a token check, so rejections are logged
with the reason but never with the token itself.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class JWTValidatorProbe(Protocol):
    """Domain probe for bearer token validation."""

    def token_validated(self, user_id: str) -> None:
        """Record that a token was accepted for a user."""
        ...

    def token_expired(self) -> None:
        """Record that an expired token was presented."""
        ...

    def token_rejected(self, reason: str) -> None:
        """Record that a token failed signature or format checks."""
        ...

    def claim_missing(self, claim: str) -> None:
        """Record that a valid token carried no user id."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultJWTValidatorProbe:
    """Default implementation of JWTValidatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        kwargs = self._context.as_dict()
        kwargs.pop("user_id", None)
        return kwargs

    def with_context(self, context: ObservationContext) -> DefaultJWTValidatorProbe:
        """Create a new probe with observation context bound."""
        return DefaultJWTValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, user_id: str) -> None:
        self._logger.debug(
            "bearer_token_validated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def token_expired(self) -> None:
        self._logger.info("bearer_token_expired", **self._get_context_kwargs())

    def token_rejected(self, reason: str) -> None:
        self._logger.warning(
            "bearer_token_rejected",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def claim_missing(self, claim: str) -> None:
        self._logger.warning(
            "bearer_token_claim_missing",
            claim=claim,
            **self._get_context_kwargs(),
        )
