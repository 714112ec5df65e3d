"""Structured Logging — JSON formatter and setup for the local service.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (decision_id, backup_id, gist_id, operation, error_code, count,
      path, status_code) surfaced when present
    - JSON format by default, human-readable text when log_format == "text"

Design Decisions:
    - JSONFormatter over third-party libs: stdlib logging is enough for one process
    - setup_logging called once on startup via lifespan
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "decision_id", "backup_id", "gist_id", "operation", "error_code", "count",
    "path", "status_code",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure root logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
