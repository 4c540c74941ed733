"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import structlog

from infrastructure.observability import ObservationContext
from infrastructure.observability.probes import DefaultConnectionProbe
from tenancy.application.observability import (
    DefaultConnectionRegistryProbe,
    DefaultTenantResolverProbe,
)


def _logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_default_probe_accepts_custom_logger(self):
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)
        assert probe._logger is mock_logger

    def test_connection_established_logs_info(self):
        """connection_established should log with host and database."""
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.connection_established(host="localhost", database="AI_FARM_user_u1")

        mock_logger.info.assert_called_once_with(
            "tenant_connection_established",
            host="localhost",
            database="AI_FARM_user_u1",
        )

    def test_connection_failed_logs_error(self):
        """connection_failed should log error with its type."""
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.connection_failed(
            host="localhost",
            database="AI_FARM_user_u1",
            error=ConnectionRefusedError("refused"),
        )

        mock_logger.error.assert_called_once_with(
            "tenant_connection_failed",
            host="localhost",
            database="AI_FARM_user_u1",
            error="refused",
            error_type="ConnectionRefusedError",
        )

    def test_table_ensured_logs_debug(self):
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.table_ensured("AI_FARM_user_u1", "cows")

        mock_logger.debug.assert_called_once_with(
            "tenant_table_ensured", database="AI_FARM_user_u1", table="cows"
        )

    def test_with_context_includes_context_fields(self):
        """Probe with context should include request metadata in every event."""
        mock_logger = _logger()
        context = ObservationContext(request_id="req-1", tenant_database="db1")
        probe = DefaultConnectionProbe(logger=mock_logger).with_context(context)

        probe.engine_disposed("AI_FARM_user_u1")

        mock_logger.info.assert_called_once_with(
            "tenant_engine_disposed",
            database="AI_FARM_user_u1",
            request_id="req-1",
            tenant_database="db1",
        )


class TestConnectionRegistryProbe:
    def test_connection_ready_logs_table_count(self):
        mock_logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=mock_logger)

        probe.connection_ready("AI_FARM_user_u1", table_count=9)

        mock_logger.info.assert_called_once_with(
            "tenant_connection_ready", database="AI_FARM_user_u1", table_count=9
        )

    def test_attempt_failed_logs_error(self):
        mock_logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=mock_logger)

        probe.attempt_failed("AI_FARM_user_u1", TimeoutError("slow"))

        mock_logger.error.assert_called_once_with(
            "tenant_connection_attempt_failed",
            database="AI_FARM_user_u1",
            error="slow",
            error_type="TimeoutError",
        )

    def test_attempt_cancelled_logs_info(self):
        mock_logger = _logger()
        probe = DefaultConnectionRegistryProbe(logger=mock_logger)

        probe.attempt_cancelled("AI_FARM_user_u1")

        mock_logger.info.assert_called_once_with(
            "tenant_connection_attempt_cancelled", database="AI_FARM_user_u1"
        )


class TestTenantResolverProbe:
    def test_database_name_resolved_logs_source(self):
        mock_logger = _logger()
        probe = DefaultTenantResolverProbe(logger=mock_logger)

        probe.database_name_resolved("u1", "AI_FARM_user_u1", "derived")

        mock_logger.debug.assert_called_once_with(
            "tenant_database_name_resolved",
            user_id="u1",
            database="AI_FARM_user_u1",
            source="derived",
        )

    def test_context_user_id_does_not_clash(self):
        """A context carrying user_id should not break user-scoped events."""
        mock_logger = _logger()
        context = ObservationContext(request_id="req-1", user_id="u1")
        probe = DefaultTenantResolverProbe(logger=mock_logger).with_context(context)

        probe.database_name_resolved("u1", "AI_FARM_user_u1", "profile")

        mock_logger.debug.assert_called_once_with(
            "tenant_database_name_resolved",
            user_id="u1",
            database="AI_FARM_user_u1",
            source="profile",
            request_id="req-1",
        )


class TestObservationContext:
    def test_as_dict_omits_unset_fields(self):
        assert ObservationContext(request_id="r").as_dict() == {"request_id": "r"}

    def test_with_tenant_database_returns_new_context(self):
        context = ObservationContext(user_id="u1")
        updated = context.with_tenant_database("AI_FARM_user_u1")

        assert context.tenant_database is None
        assert updated.as_dict() == {
            "user_id": "u1",
            "tenant_database": "AI_FARM_user_u1",
        }

    def test_with_extra_merges(self):
        context = ObservationContext().with_extra(a=1).with_extra(b=2)
        assert context.as_dict() == {"a": 1, "b": 2}
