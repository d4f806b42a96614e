"""
Unit tests for the logging manager
"""

import logging

import pytest

from utils import LogContext, MetricsLogger, TransportFault, ErrorCodes, log_execution


@pytest.mark.unit
class TestMetricsLogger:
    """Test cases for MetricsLogger"""

    def test_counts_by_name(self):
        metrics = MetricsLogger("Probe")
        metrics.increment("requests")
        metrics.increment("requests")
        metrics.increment("failures", 3)

        assert metrics.count("requests") == 2
        assert metrics.count("missing") == 0
        assert metrics.get_metrics() == {"Probe.requests": 2, "Probe.failures": 3}

        metrics.reset()
        assert metrics.get_metrics() == {}


@pytest.mark.unit
class TestLogContext:
    """Test cases for LogContext and log_execution"""

    def test_success_logs_completion(self, caplog):
        with caplog.at_level(logging.INFO, logger="Probe"):
            with LogContext("Probe", "update", quote_id=7):
                pass

        assert "[Probe.update.ID:7] Completed" in caplog.text

    def test_api_error_is_logged_and_propagated(self, caplog):
        fault = TransportFault("boom", ErrorCodes.NETWORK_BAD_STATUS, status=500)

        with caplog.at_level(logging.WARNING, logger="Probe"):
            with pytest.raises(TransportFault):
                with LogContext("Probe", "create"):
                    raise fault

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "Failed" in record.getMessage()

    @pytest.mark.asyncio
    async def test_decorator_wraps_coroutines(self, caplog):
        @log_execution("Probe", "fetch")
        async def fetch(quote_id=None):
            return quote_id

        with caplog.at_level(logging.INFO, logger="Probe"):
            assert await fetch(quote_id=3) == 3

        assert "[Probe.fetch.ID:3] Completed" in caplog.text
