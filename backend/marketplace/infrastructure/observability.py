"""Structured Logging — one stream handler on the root logger, JSON or text.

Invariants:
    - Every JSON record carries timestamp (from the record, UTC), level, logger, message
    - Marketplace context passed through `extra=` (listing_id, username, image_name...)
      becomes top-level JSON keys; unknown extras are ignored
    - setup_logging() is idempotent: calling it again replaces its own handler

Design Decisions:
    - JSONFormatter on stdlib logging: no extra dependency
    - SQLAlchemy engine logging pinned to WARNING unless the app runs at DEBUG
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_KEYS = (
    "listing_id", "username", "image_name", "file_count",
    "error_code", "operation", "path",
)

_HANDLER_NAME = "marketplace"
_TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in CONTEXT_KEYS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the marketplace handler on the root logger and return it."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT),
    )
    root.addHandler(handler)

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    root.setLevel(numeric_level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING,
    )
    return handler
