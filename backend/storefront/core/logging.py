"""Structured logging configuration for Storefront.

Provides JSON-structured logging for production (log aggregation friendly)
and human-readable logging for development.

Erasure code must never log pre-erasure personal data. Log the user id, the
outcome and the anonymized tag only.
"""

import json
import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Context variable for erasure request correlation ID
request_id_var: ContextVar[str] = ContextVar("erasure_request_id", default="")


class JSONFormatter(logging.Formatter):
    """JSON log formatter for log aggregation systems."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        # Add extra fields from record
        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Human-readable log formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        """Format as one line: time, level, request ID, logger, message, then key=value fields."""
        request_id = request_id_var.get()
        rid_part = f"[{request_id[:8]}] " if request_id else ""

        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        message = f"{timestamp} {record.levelname:8} {rid_part}{record.name}: {record.getMessage()}"

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            message += " " + " ".join(f"{k}={v}" for k, v in extra_fields.items())

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(level: str = "INFO", debug: bool = False, json_logs: bool = False) -> None:
    """Configure application logging.

    Args:
        level: Log level name used when debug is off.
        debug: If True, force the log level to DEBUG.
        json_logs: If True, use JSON formatting. Otherwise use development formatter.
    """
    log_level = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)

    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("celery").setLevel(logging.WARNING)


def generate_request_id() -> str:
    """Generate a unique request ID for correlating one erasure's log lines."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get the request ID for the current context, or empty string."""
    return request_id_var.get()


@contextmanager
def request_context(request_id: str | None = None) -> Iterator[str]:
    """Bind a request ID to every log record emitted inside the block.

    The previous ID is restored on exit, so nested or pooled workers never
    leak an ID into unrelated work.
    """
    token = request_id_var.set(request_id or generate_request_id())
    try:
        yield request_id_var.get()
    finally:
        request_id_var.reset(token)
