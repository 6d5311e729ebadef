"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import structlog

from infrastructure.observability import DefaultStoreProbe, ObservationContext
from tracking.infrastructure.observability import DefaultTrackingRepositoryProbe


class TestStoreProbe:
    """Tests for StoreProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        """Default probe should work without explicit logger."""
        probe = DefaultStoreProbe()
        assert probe._logger is not None

    def test_store_opened_logs_info(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStoreProbe(logger=mock_logger)

        probe.store_opened(host="localhost", database="geotrace")

        mock_logger.info.assert_called_once_with(
            "store_opened",
            host="localhost",
            database="geotrace",
        )

    def test_store_open_failed_logs_error(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStoreProbe(logger=mock_logger)

        probe.store_open_failed(
            host="localhost", database="geotrace", error=OSError("refused")
        )

        mock_logger.error.assert_called_once_with(
            "store_open_failed",
            host="localhost",
            database="geotrace",
            error="refused",
        )

    def test_lease_events_log_debug(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultStoreProbe(logger=mock_logger)

        probe.lease_acquired()
        probe.lease_released()

        assert [c.args[0] for c in mock_logger.debug.call_args_list] == [
            "store_lease_acquired",
            "store_lease_released",
        ]

    def test_with_context_includes_metadata(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        context = ObservationContext(request_id="req-1", group_id="g1")
        probe = DefaultStoreProbe(logger=mock_logger).with_context(context)

        probe.store_closed("geotrace")

        mock_logger.info.assert_called_once_with(
            "store_closed",
            database="geotrace",
            request_id="req-1",
            context_group_id="g1",
        )


class TestTrackingRepositoryProbe:
    """Tests for DefaultTrackingRepositoryProbe."""

    def test_entities_created_logs_ids_and_count(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultTrackingRepositoryProbe(logger=mock_logger)

        probe.entities_created("events", "g1", ["e1", "e2"])

        mock_logger.info.assert_called_once_with(
            "entities_created",
            collection="events",
            group_id="g1",
            entity_ids=["e1", "e2"],
            count=2,
        )

    def test_duplicate_key_logs_warning(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultTrackingRepositoryProbe(logger=mock_logger)

        probe.duplicate_key("users", ["alice"])

        mock_logger.warning.assert_called_once_with(
            "duplicate_key", collection="users", entity_ids=["alice"]
        )

    def test_login_lookup_logs_outcome(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        probe = DefaultTrackingRepositoryProbe(logger=mock_logger)

        probe.login_lookup("devices", "d1", found=False)

        mock_logger.info.assert_called_once_with(
            "login_lookup", collection="devices", entity_id="d1", found=False
        )

    def test_context_group_does_not_clobber_event_group(self):
        mock_logger = MagicMock(spec=structlog.stdlib.BoundLogger)
        context = ObservationContext(group_id="admin-group")
        probe = DefaultTrackingRepositoryProbe(logger=mock_logger).with_context(context)

        probe.entity_deleted("places", "g1", "p1")

        mock_logger.info.assert_called_once_with(
            "entity_deleted",
            collection="places",
            group_id="g1",
            entity_id="p1",
            context_group_id="admin-group",
        )
