"""Tests for logging setup."""

import logging

import pytest

from orgroles.utils.logging_config import (
    ColoredConsoleFormatter,
    LoggingConfig,
    LogLevel,
    SensitiveDataFilter,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger("orgroles")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def _record(msg, args=()):
    return logging.LogRecord("orgroles.test", logging.INFO, __file__, 1, msg, args, None)


class TestSensitiveDataFilter:
    """Test cases for token redaction."""

    def test_redacts_bearer_token_in_message(self):
        record = _record("Authorization: Bearer eyJhbGciOi.abc.def")

        assert SensitiveDataFilter(LoggingConfig().sensitive_data_patterns).filter(record)
        assert "eyJhbGciOi" not in record.msg
        assert "[REDACTED]" in record.msg

    def test_redacts_token_in_args(self):
        record = _record("posting %s", ("refresh_token=secret-value&client_id=x",))

        SensitiveDataFilter(LoggingConfig().sensitive_data_patterns).filter(record)

        assert "secret-value" not in record.getMessage()
        assert "client_id=x" in record.getMessage()

    def test_leaves_other_messages_alone(self):
        record = _record("Fetched page 3")

        SensitiveDataFilter(LoggingConfig().sensitive_data_patterns).filter(record)

        assert record.msg == "Fetched page 3"


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_default_level_is_warning(self):
        logger = setup_logging()

        assert logger.name == "orgroles"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1

    def test_debug_config(self):
        logger = setup_logging(LoggingConfig.for_debug(True))

        assert logger.level == logging.DEBUG
        assert logging.getLogger("urllib3").level == logging.DEBUG

    def test_repeated_setup_does_not_duplicate_handlers(self):
        setup_logging()
        logger = setup_logging(LoggingConfig(level=LogLevel.INFO))

        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO

    def test_formatter_includes_thread_name(self):
        formatter = ColoredConsoleFormatter(use_colors=False)
        record = _record("hello")
        record.threadName = "worker-2"

        output = formatter.format(record)

        assert "worker-2" in output
        assert "orgroles.test - hello" in output
