"""
Taskboard - Logging Configuration
Console (and optional file) logging with structured extra fields.

Usage:
    from logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Task created", extra={"extra_fields": {"task_id": 3}})
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """
    Plain text formatter that appends `extra_fields` as key=value pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            pairs = " ".join(f"{key}={value}" for key, value in extra_fields.items())
            message = f"{message} [{pairs}]"
        return message


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            payload.update(extra_fields)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", log_format: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure the root logger. Safe to call more than once; handlers are replaced.

    Args:
        level: Root log level name (DEBUG, INFO, ...)
        log_format: "text" (default) or "json"; falls back to LOG_FORMAT env
        log_file: Optional path for a full DEBUG log; falls back to LOG_FILE env
    """
    log_format = (log_format or os.getenv("LOG_FORMAT", "text")).lower()
    log_file = log_file or os.getenv("LOG_FILE")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_file else getattr(logging, level.upper(), logging.INFO))

    # Remove any pre-existing handlers to avoid duplicates
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = StructuredFormatter(fmt=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(getattr(logging, level.upper(), logging.INFO))
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    # Access logs are noisy at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""
    return logging.getLogger(name)
