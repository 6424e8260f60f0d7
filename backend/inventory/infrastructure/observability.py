"""Structured Logging — JSON log lines for the inventory API.

Invariants:
    - Every line has timestamp, level, logger and message
    - Request and tenant context (organization_id, entity, error_code, ...) is
      surfaced only when the caller passed it via `extra`
    - setup_logging is idempotent: calling it twice never duplicates lines

Design Decisions:
    - JSONFormatter on stdlib logging: log shippers parse one object per line
    - SQLAlchemy engine echo kept at WARNING: statements would leak form values
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "organization_id", "entity", "entity_id", "error_code", "field_name",
    "error_count", "method", "path",
)

_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "multipart")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log.update({
            key: record.__dict__[key]
            for key in _EXTRA_KEYS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            log["exception_type"] = record.exc_info[0].__name__
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class _InventoryHandler(logging.StreamHandler):
    """Marker type so setup_logging can find and replace its own handler."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the inventory handler on the root logger (once)."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _InventoryHandler)]:
        root.removeHandler(existing)

    handler = _InventoryHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
