"""Structured Logging — JSON formatter and one-time logging setup.

Invariants:
    - Every record carries timestamp, level, logger and message
    - Request-scoped extras (user_id, event_id, error_code, path) included when present
    - setup_logging is idempotent: calling it twice never duplicates handlers

Design Decisions:
    - stdlib logging with a small JSON formatter; text format for local development
    - Called once from the FastAPI lifespan
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = ("user_id", "event_id", "error_code", "path", "status_code")

_HANDLER_NAME = "ventytime"


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            value = record.__dict__.get(key)
            if value is not None:
                payload[key] = str(value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
