"""Tests for structured logging setup."""

import io
import json
import structlog

from apps.api.core.logging import setup_logging


class TestStructuredLogging:
    """Test structlog outputs structured JSON."""

    def test_setup_logging_configures_structlog(self):
        """After setup, structlog.get_logger() should return a bound logger."""
        setup_logging(log_level="DEBUG", json_output=True)
        logger = structlog.get_logger()
        assert logger is not None

    def test_setup_logging_dev_mode(self):
        """Dev mode should configure console renderer without errors."""
        setup_logging(log_level="DEBUG", json_output=False)
        logger = structlog.get_logger()
        assert logger is not None

    def test_json_output_goes_to_stream(self):
        """Events render as one JSON object per line on the given stream."""
        stream = io.StringIO()
        setup_logging(log_level="INFO", json_output=True, stream=stream)

        structlog.get_logger("statements").info("statement_parsed", bank="HDFC", transactions=3)

        record = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert record["event"] == "statement_parsed"
        assert record["bank"] == "HDFC"
        assert record["transactions"] == 3
        assert record["level"] == "info"
