"""Structured Logging — JSON formatter and setup for guard lifecycle events.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (guard_id, resolution, owner, error_code) surfaced when present
    - JSON format by default, human-readable on request

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging is opt-in and idempotent: repeat calls swap the handler, never stack
"""

import logging
import json
from datetime import datetime, timezone

from revertible.config import get_settings

_EXTRA_FIELDS = ("guard_id", "resolution", "owner", "error_code")

# Handler added by the last setup_logging() call
_installed_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """One JSON object per record; guard extras only when the record carries them."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **{
                key: getattr(record, key) for key in _EXTRA_FIELDS
                if getattr(record, key, None) is not None
            },
        }
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Handler:
    """Configure root logging; unset arguments come from Settings.

    Calling it again replaces the handler it installed before.
    """
    global _installed_handler
    settings = get_settings()
    level = level or settings.log_level
    fmt = fmt or settings.log_format
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    if _installed_handler is not None:
        logging.root.removeHandler(_installed_handler)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _installed_handler = handler
    return handler
