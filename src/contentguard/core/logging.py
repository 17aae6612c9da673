"""Structured logging for ContentGuard.

This module provides consistent logging configuration
with support for both structured (JSON) and plain text formats.
"""

import logging
import sys
from typing import Any

from contentguard.core.config import get_settings


class StructuredFormatter(logging.Formatter):
    """JSON-formatted log output for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        import json
        from datetime import datetime

        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class PlainFormatter(logging.Formatter):
    """Human-readable plain text log format."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = getattr(record, "extra_data", None)
        if extra:
            context = " ".join(f"{k}={v}" for k, v in extra.items())
            line = f"{line} | {context}"
        return line


def _build_handler(level: int, format: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if format == "structured":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(PlainFormatter())
    return handler


def setup_logging(level: str = "INFO", format: str = "plain") -> None:
    """Configure root logging for ContentGuard.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Output format ("plain" or "structured")
    """
    root = logging.getLogger("contentguard")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not root.handlers:
        root.addHandler(_build_handler(root.level, format))
        root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger for a module.

    Loggers under the "contentguard" namespace inherit the package
    logger's handler once setup_logging() has run. Other names get
    their own handler built from settings.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if name == "contentguard" or name.startswith("contentguard."):
        return logger

    # Only configure if not already configured
    if not logger.handlers:
        settings = get_settings()
        level = getattr(logging, settings.log_level.upper(), logging.INFO)
        logger.setLevel(level)
        logger.addHandler(_build_handler(level, settings.log_format))
        logger.propagate = False

    return logger


class LogContext:
    """Context manager for adding extra data to log messages.

    Example:
        >>> logger = get_logger(__name__)
        >>> with LogContext(logger, validator="media", file="content/blog/a/index.mdx"):
        ...     logger.info("Validating")
    """

    def __init__(self, logger: logging.Logger, **extra: Any) -> None:
        """Initialize LogContext.

        Args:
            logger: The logger to add context to
            **extra: Extra fields to include in log messages
        """
        self.logger = logger
        self.extra = extra
        self._old_factory: Any = None

    def __enter__(self) -> "LogContext":
        """Enter context and set up extra data."""
        old_factory = logging.getLogRecordFactory()
        extra = self.extra

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = old_factory(*args, **kwargs)
            merged = dict(getattr(record, "extra_data", None) or {})
            merged.update(extra)
            record.extra_data = merged  # type: ignore[attr-defined]
            return record

        self._old_factory = old_factory
        logging.setLogRecordFactory(record_factory)
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context and restore original factory."""
        if self._old_factory:
            logging.setLogRecordFactory(self._old_factory)
