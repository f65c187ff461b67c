"""Structured logging configuration for the product generator.

JSON lines for production log aggregation, a coloured one-line format for
local development.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Record attributes copied into JSON output when present.
EXTRA_FIELDS: tuple[str, ...] = (
    "event",
    "request_id",
    "image_file",
    "index",
    "duration_ms",
    "status_code",
    "images",
    "products",
    "errors",
)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def __init__(
        self,
        *,
        include_path: bool = False,
        extra_fields: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.include_path = include_path
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_path:
            log_data["path"] = f"{record.pathname}:{record.lineno}"
            log_data["function"] = record.funcName

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        log_data.update(self.extra_fields)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class PrettyFormatter(logging.Formatter):
    """Human-readable formatter for development/debugging."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
        level = f"{color}{record.levelname:8}{self.RESET}"
        logger_name = record.name[:28].ljust(28)

        output = f"{timestamp} | {level} | {logger_name} | {record.getMessage()}"
        if record.exc_info:
            output += f"\n{self.formatException(record.exc_info)}"
        return output


def setup_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
    include_path: bool = False,
    service_name: str = "shopify-generator",
) -> None:
    """Configure logging for the application.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON format (True) or pretty format (False)
        include_path: Include source file path in logs
        service_name: Service name to include in JSON logs
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter: logging.Formatter = JSONFormatter(
            include_path=include_path,
            extra_fields={"service": service_name},
        )
    else:
        formatter = PrettyFormatter()

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    for noisy in ("httpx", "httpcore", "openai", "supabase", "storage3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


LOG_EVENT_TITLES: dict[str, str] = {
    "batch_started": "Batch: processing started",
    "batch_finished": "Batch: processing finished",
    "image_failed": "Image: processing failed",
    "image_upload_failed": "Image: upload failed",
    "csv_generated": "CSV: generated",
}


def log_event(
    logger: logging.Logger,
    *,
    event: str,
    level: str | None = None,
    **kwargs: Any,
) -> None:
    """Log a named pipeline event with its context as structured extras.

    The message is the event title followed by ``key=value`` pairs so that
    the pretty formatter stays readable without the JSON fields.
    """
    log_fn = getattr(logger, (level or "info").lower(), logger.info)
    title = LOG_EVENT_TITLES.get(event, event)
    details = " ".join(f"{key}={value}" for key, value in kwargs.items())
    message = f"{title} | {details}" if details else title
    log_fn(message, extra={"event": event, **kwargs})


def safe_preview(value: Any, max_len: int = 120) -> str:
    """Return a safe string preview of value."""
    if value is None:
        return ""
    text = str(value)
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
