"""Logging configuration for orgroles."""

import logging
import os
import re
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class LogLevel(str, Enum):
    """Log levels for configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class LoggingConfig:
    """Configuration for the logging system."""

    level: LogLevel = LogLevel.WARNING
    console_colors: bool = True
    log_http_requests: bool = False
    sensitive_data_patterns: List[str] = field(
        default_factory=lambda: [
            r"(?i)bearer\s+[A-Za-z0-9\-_.=]+",
            r"(?i)(access_token|refresh_token)=[^&\s]+",
        ]
    )

    @classmethod
    def for_debug(cls, debug: bool) -> "LoggingConfig":
        """Build the configuration selected by the --debug flag."""
        if debug:
            return cls(level=LogLevel.DEBUG, log_http_requests=True)
        return cls()


class SensitiveDataFilter(logging.Filter):
    """Filter to redact tokens from log messages."""

    def __init__(self, patterns: List[str]) -> None:
        super().__init__()
        self.compiled_patterns = [re.compile(pattern) for pattern in patterns]

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Redact sensitive data in place.

        Returns:
            bool: Always True (records are modified, never dropped)
        """
        if isinstance(record.msg, str):
            record.msg = self._redact(record.msg)

        if record.args:
            if isinstance(record.args, tuple):
                record.args = tuple(
                    self._redact(arg) if isinstance(arg, str) else arg for arg in record.args
                )

        return True

    def _redact(self, text: str) -> str:
        for pattern in self.compiled_patterns:
            text = pattern.sub("[REDACTED]", text)
        return text


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter with color support."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and self._supports_color()

    def _supports_color(self) -> bool:
        """Check if the terminal supports colors."""
        return (
            hasattr(sys.stderr, "isatty")
            and sys.stderr.isatty()
            and os.environ.get("TERM") != "dumb"
        )

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        if self.use_colors:
            color = self.COLORS.get(record.levelname, "")
            reset = self.COLORS["RESET"]
            formatted = (
                f"{color}[{timestamp}] {record.levelname:<8}{reset} - "
                f"{record.threadName} - {record.name} - {record.getMessage()}"
            )
        else:
            formatted = (
                f"[{timestamp}] {record.levelname:<8} - "
                f"{record.threadName} - {record.name} - {record.getMessage()}"
            )

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted


def setup_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Configure the orgroles logger hierarchy.

    Log output goes to stderr so it never mixes with the printed table.

    Args:
        config: Logging configuration, defaults to warnings only

    Returns:
        logging.Logger: The package root logger
    """
    config = config or LoggingConfig()
    level = getattr(logging, config.level.value)

    root_logger = logging.getLogger("orgroles")
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ColoredConsoleFormatter(use_colors=config.console_colors))
    if config.sensitive_data_patterns:
        handler.addFilter(SensitiveDataFilter(config.sensitive_data_patterns))
    root_logger.addHandler(handler)

    http_level = logging.DEBUG if config.log_http_requests else logging.WARNING
    for logger_name in ("urllib3", "urllib3.connectionpool", "requests"):
        http_logger = logging.getLogger(logger_name)
        http_logger.setLevel(http_level)
        if config.log_http_requests and not http_logger.handlers:
            http_logger.addHandler(handler)

    return root_logger
