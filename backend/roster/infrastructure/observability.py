"""Structured Logging: JSON and key=value renderings of one log record shape.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Only whitelisted extras (ROSTER_EXTRAS) are rendered; anything else on the record is ignored
    - "json" emits one JSON object per line; any other format emits "key=value" text
    - Both formats render the same extras, so access logs keep method/status/duration in either mode
    - setup_logging is idempotent: it replaces the handler it installed, never stacks
"""

import json
import logging
from datetime import datetime, timezone

ROSTER_EXTRAS: tuple[str, ...] = (
    "method", "path", "status_code", "duration_ms", "client",
    "user_id", "error_code", "removed",
)

_HANDLER_NAME = "roster"


def record_extras(record: logging.LogRecord) -> dict:
    """Whitelisted extra fields present on the record, in ROSTER_EXTRAS order."""
    return {
        key: record.__dict__[key]
        for key in ROSTER_EXTRAS
        if record.__dict__.get(key) is not None
    }


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, timezone.utc).isoformat()


class JSONFormatter(logging.Formatter):
    """One JSON object per record; non-JSON values (datetimes, enums) go through str()."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_extras(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class KeyValueFormatter(logging.Formatter):
    """Human-readable line: '<ts> LEVEL logger: message key=value ...'."""

    def format(self, record: logging.LogRecord) -> str:
        line = (
            f"{_timestamp(record)} {record.levelname} {record.name}: "
            f"{record.getMessage()}"
        )
        pairs = " ".join(f"{k}={v}" for k, v in record_extras(record).items())
        if pairs:
            line = f"{line} {pairs}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the roster handler on the root logger and return it."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else KeyValueFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
