"""
Unit Tests for Metrics Abstraction Layer

This module tests the metrics interface used by the request middleware and the
resolver, and the backends behind it (Telegraf, NoOp).

Test Coverage:
- MetricsClient interface implementations
- Backend selection via factory function
- Error handling on close
"""

import pytest
from unittest.mock import Mock, patch, AsyncMock

from social.graze.naming.app.metrics import (
    MetricsClient,
    TelegrafCompatibilityClient,
    NoOpMetricsClient,
    create_metrics_client,
)


class TestMetricsClientInterface:
    """Test the abstract MetricsClient interface."""

    def test_interface_is_abstract(self):
        """MetricsClient should be abstract and not instantiable."""
        with pytest.raises(TypeError):
            MetricsClient()  # type: ignore

    def test_interface_records_counters_and_timers_only(self):
        assert MetricsClient.__abstractmethods__ == frozenset(
            {"increment", "timer", "close"}
        )


class TestNoOpMetricsClient:
    """Test the NoOpMetricsClient implementation."""

    @pytest.fixture
    def noop_client(self):
        return NoOpMetricsClient()

    def test_noop_calls(self, noop_client):
        """NoOp recording methods should not raise exceptions."""
        noop_client.increment("naming.preferred_id.outcome", 1, {"outcome": "success"})
        noop_client.increment("naming.preferred_id.outcome")
        noop_client.timer("naming.server.request.time", 0.001)

    async def test_noop_connect_and_close(self, noop_client):
        await noop_client.connect()
        await noop_client.close()


class TestTelegrafCompatibilityClient:
    """Test the TelegrafCompatibilityClient wrapper."""

    @pytest.fixture
    def mock_telegraf_client(self):
        """Create a mock TelegrafStatsdClient."""
        mock = Mock()
        mock.connect = AsyncMock()
        mock.close = AsyncMock()
        return mock

    @pytest.fixture
    def telegraf_client(self, mock_telegraf_client):
        return TelegrafCompatibilityClient(mock_telegraf_client)

    def test_telegraf_increment(self, telegraf_client, mock_telegraf_client):
        """Telegraf increment should delegate to underlying client."""
        telegraf_client.increment("naming.preferred_id.outcome", 1, {"outcome": "not_found"})

        mock_telegraf_client.increment.assert_called_once_with(
            "naming.preferred_id.outcome", 1, tag_dict={"outcome": "not_found"}
        )

    def test_telegraf_timer(self, telegraf_client, mock_telegraf_client):
        telegraf_client.timer("naming.server.request.time", 0.25, {"method": "GET"})

        mock_telegraf_client.timer.assert_called_once_with(
            "naming.server.request.time", 0.25, tag_dict={"method": "GET"}
        )

    def test_telegraf_increment_no_tags(self, telegraf_client, mock_telegraf_client):
        """Telegraf increment should handle None tag_dict gracefully."""
        telegraf_client.increment("test.counter")

        mock_telegraf_client.increment.assert_called_once_with(
            "test.counter", 1, tag_dict={}
        )

    async def test_telegraf_connect(self, telegraf_client, mock_telegraf_client):
        await telegraf_client.connect()

        mock_telegraf_client.connect.assert_awaited_once()

    async def test_telegraf_close_error_is_logged(
        self, telegraf_client, mock_telegraf_client
    ):
        """A failing close should not propagate out of shutdown."""
        mock_telegraf_client.close.side_effect = OSError("socket closed")

        with patch("social.graze.naming.app.metrics.logger") as mock_logger:
            await telegraf_client.close()

        mock_logger.warning.assert_called_once()


class TestCreateMetricsClient:
    """Test backend selection."""

    def test_none_backend(self):
        assert isinstance(create_metrics_client("none"), NoOpMetricsClient)

    def test_backend_name_ignores_case(self):
        assert isinstance(create_metrics_client("NONE"), NoOpMetricsClient)

    def test_telegraf_backend_with_client(self):
        telegraf = Mock()
        client = create_metrics_client("telegraf", telegraf_client=telegraf)

        assert isinstance(client, TelegrafCompatibilityClient)
        assert client.client is telegraf

    @patch("social.graze.naming.app.metrics.TelegrafStatsdClient")
    def test_telegraf_backend_builds_client(self, mock_statsd):
        client = create_metrics_client("telegraf", host="telegraf", port=8125)

        assert isinstance(client, TelegrafCompatibilityClient)
        mock_statsd.assert_called_once_with(host="telegraf", port=8125, debug=False)

    def test_invalid_backend(self):
        with pytest.raises(ValueError, match="Invalid metrics backend"):
            create_metrics_client("otel")
