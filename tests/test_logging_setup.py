"""Tests for structlog configuration."""
import io
import json

import pytest
import structlog

from ocean_engine.logging_setup import configure_logging


@pytest.fixture
def log_stream():
    stream = io.StringIO()
    yield stream
    structlog.reset_defaults()


class TestConfigureLogging:

    def test_emits_json_lines(self, log_stream):
        configure_logging("DEBUG", stream=log_stream)
        structlog.get_logger("ocean_engine.test").info("trait_scored", dimension="openness")
        event = json.loads(log_stream.getvalue().strip())
        assert event["event"] == "trait_scored"
        assert event["dimension"] == "openness"
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filters_lower_events(self, log_stream):
        configure_logging("WARNING", stream=log_stream)
        logger = structlog.get_logger("ocean_engine.test")
        logger.info("ignored")
        logger.warning("kept")
        assert "ignored" not in log_stream.getvalue()
        assert "kept" in log_stream.getvalue()

    def test_unknown_level_falls_back_to_info(self, log_stream):
        configure_logging("VERBOSE", stream=log_stream)
        logger = structlog.get_logger("ocean_engine.test")
        logger.debug("hidden")
        logger.info("shown")
        assert "hidden" not in log_stream.getvalue()
        assert "shown" in log_stream.getvalue()
