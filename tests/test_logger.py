"""Tests for JSON logger module."""

import json
import logging
import sys
from unittest.mock import patch

from src.shared.logger import JSONFormatter, get_logger


def _record(msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=None,
        exc_info=None,
    )


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_format_basic_message(self) -> None:
        """Test basic log record formatting as JSON."""
        result = json.loads(JSONFormatter().format(_record()))

        assert result["level"] == "INFO"
        assert result["message"] == "Test message"
        assert result["logger"] == "test"
        assert "timestamp" in result
        assert "pathname" not in result

    def test_format_record_with_extra_fields(self) -> None:
        """Test fields passed via extra= are merged into the JSON output."""
        record = _record("Test with extra")
        record.__dict__.update({"indicator": "rsi", "kind": "INVALID_PARAMS"})

        result = json.loads(JSONFormatter().format(record))

        assert result["indicator"] == "rsi"
        assert result["kind"] == "INVALID_PARAMS"
        assert result["message"] == "Test with extra"

    def test_format_non_serializable_extra(self) -> None:
        """Test values json cannot encode are stringified."""
        record = _record()
        record.__dict__["error"] = ValueError("bad period")

        result = json.loads(JSONFormatter().format(record))

        assert result["error"] == "bad period"

    def test_format_exception(self) -> None:
        """Test exception info is rendered."""
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                name="test",
                level=logging.ERROR,
                pathname="test.py",
                lineno=1,
                msg="failed",
                args=None,
                exc_info=sys.exc_info(),
            )

        result = json.loads(JSONFormatter().format(record))

        assert "RuntimeError: boom" in result["exception"]


class TestGetLogger:
    """Tests for get_logger factory."""

    def test_get_logger_skips_handler_when_already_exists(self) -> None:
        """Test get_logger does not add duplicate handlers."""
        logger_name = "test.duplicate_handler_check"
        logger = logging.getLogger(logger_name)
        logger.handlers.clear()

        # First call adds a handler
        result1 = get_logger(logger_name)
        handler_count = len(result1.handlers)

        # Second call should not add another handler
        result2 = get_logger(logger_name)

        assert len(result2.handlers) == handler_count

    @patch.dict("os.environ", {"LOG_LEVEL": "warning"}, clear=True)
    def test_level_from_environment(self) -> None:
        """Test LOG_LEVEL sets the default level."""
        assert get_logger("test.env_level").level == logging.WARNING

    @patch.dict("os.environ", {"LOG_LEVEL": "chatty"}, clear=True)
    def test_unknown_level_falls_back_to_info(self) -> None:
        """Test an unknown LOG_LEVEL falls back to INFO."""
        assert get_logger("test.bad_level").level == logging.INFO

    def test_explicit_level(self) -> None:
        """Test an explicit level wins over the environment."""
        assert get_logger("test.explicit", logging.DEBUG).level == logging.DEBUG
