"""JSON logging for the relay.

One JSON object per line on stdout, which both the FastAPI process and the
serverless runtime forward to their log collectors. Prompts, model replies and
the upstream API key never go into a record.
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import UTC, datetime
from typing import Any

# `extra` keys copied into every payload; absent keys render as null.
# Each entry maps the output key to the record attributes tried in order.
_EXTRA_FIELDS: dict[str, tuple[str, ...]] = {
    "request_id": ("request_id",),
    "method": ("method", "http_method"),
    "path": ("path", "request_path"),
    "status_code": ("status_code",),
    "duration_ms": ("duration_ms",),
    "upstream_status": ("upstream_status",),
    "invalid_settings": ("invalid_settings",),
}


def _first_attr(record: logging.LogRecord, names: tuple[str, ...]) -> Any:
    for name in names:
        value = getattr(record, name, None)
        if value is not None:
            return value
    return None


class JsonFormatter(logging.Formatter):
    """Render records as JSON without ever raising on a missing `extra` key.

    httpx, uvicorn and other libraries log without our extras, so
    `%(request_id)s`-style format strings are not an option.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, names in _EXTRA_FIELDS.items():
            payload[key] = _first_attr(record, names)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str | None = None) -> None:
    """Route the root logger through JsonFormatter; level defaults to $LOG_LEVEL."""

    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": JsonFormatter}},
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {"level": level, "handlers": ["stdout"]},
        }
    )
