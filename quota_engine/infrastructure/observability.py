"""Structured Logging: JSON lines carrying per-tenant quota context.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Quota extras surface when set: tenant_id and source on every store failure;
      plan/cap/used/incoming_count on admission denials; target_cap/to_delete
      before an eviction and deleted_* tallies after it
    - Non-JSON-native extras (PlanTier, datetimes) are rendered with str()
    - JSON format in production, human-readable ("text") in development and tests

Design Decisions:
    - setup_logging called once on startup via lifespan
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "tenant_id", "source", "error_code", "path", "plan", "cap", "used",
    "incoming_count", "target_cap", "to_delete", "deleted",
    "deleted_transactions", "deleted_receipt_trips",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
