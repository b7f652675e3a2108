"""Structured Logging — one JSON object per line, carrying interaction context.

Invariants:
    - Every line has timestamp (UTC, ISO-8601), level, logger, service, message
    - Interaction context passed via `extra=` (profile_key, viewer_id, attempt,
      first_visit, error_code, path) becomes top-level JSON keys
    - setup_logging is idempotent: a second call replaces the handler it
      installed instead of stacking another one

Design Decisions:
    - Stdlib logging + a small JSON formatter, no logging framework
    - "text" format for local runs; anything else means JSON
    - SQLAlchemy engine logging pinned to WARNING: statement echo would log
      viewer identities on every interaction
"""

import json
import logging
from datetime import datetime, timezone

SERVICE_NAME = "persona-profiles-api"
SERVICE_VERSION = "1.0.0"

CONTEXT_FIELDS = (
    "profile_key", "viewer_id", "attempt", "first_visit", "error_code", "path",
)

_HANDLER_NAME = "persona-root"


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
        }
        entry.update({
            field: getattr(record, field)
            for field in CONTEXT_FIELDS
            if getattr(record, field, None) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "text":
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s",
        ))
    else:
        handler.setFormatter(JSONFormatter())

    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
