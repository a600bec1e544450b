"""Utilities for configuring structured process logging."""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict

from .config import Settings


_LOG_RECORD_RESERVED_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
    "asctime",
}

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JsonLogFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def serialize_record(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Convert a log record into a JSON-safe payload."""
        created_at = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: Dict[str, Any] = {
            "timestamp": created_at.isoformat(),
            "service": self.service_name,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            payload["traceback"] = "".join(traceback.format_exception(*record.exc_info))
        elif record.exc_text:
            payload["traceback"] = record.exc_text

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _LOG_RECORD_RESERVED_KEYS and not key.startswith("_")
        }
        if extra:
            sanitized: Dict[str, Any] = {}
            for key, value in extra.items():
                try:
                    json.dumps(value)
                    sanitized[key] = value
                except (TypeError, ValueError):
                    sanitized[key] = repr(value)
            payload["extra"] = sanitized

        return payload

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - standard format signature
        return json.dumps(self.serialize_record(record))


class _ServiceHandler(logging.StreamHandler):
    """Marker type so repeated configuration replaces rather than stacks handlers."""


def configure_logging(settings: Settings, service_name: str = "transit-analytics") -> logging.Handler:
    """Install one stream handler on the root logger per `settings`.

    Calling it again replaces the handler installed by a previous call.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = _ServiceHandler(sys.stdout)
    handler.setLevel(level)
    if settings.log_format.lower() == "json":
        handler.setFormatter(JsonLogFormatter(service_name))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if isinstance(existing, _ServiceHandler):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return handler
