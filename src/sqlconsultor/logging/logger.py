"""Structured logging for sqlconsultor.

Records are rendered as one JSON object per line. Fields passed through
``extra=`` are kept; database fields named ``db.<key>`` (the OpenTelemetry
semantic convention used by the engine) are grouped under a ``db`` object.
When a span is active, its trace and span ids are added so log lines can be
joined with traces.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet

from opentelemetry import trace

DB_FIELD_PREFIX = "db."


def _standard_record_keys() -> FrozenSet[str]:
    """Attributes every ``LogRecord`` carries, which are never copied as extras."""
    sample = logging.makeLogRecord({})
    return frozenset(sample.__dict__) | {"asctime", "message"}


_STANDARD_KEYS = _standard_record_keys()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class CustomJsonFormatter(logging.Formatter):
    """JSON formatter with grouped database fields and trace correlation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        db: Dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _STANDARD_KEYS or key in payload:
                continue
            if key.startswith(DB_FIELD_PREFIX):
                db[key[len(DB_FIELD_PREFIX):]] = value
            else:
                payload[key] = value
        if db:
            payload["db"] = db

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            payload["trace_id"] = format(span_context.trace_id, "032x")
            payload["span_id"] = format(span_context.span_id, "016x")

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(level: str = "INFO", sqlalchemy_level: str = "WARNING") -> None:
    """Configure JSON logging on stdout through ``dictConfig``.

    Args:
        level: Level of the root logger and the console handler
        sqlalchemy_level: Level of SQLAlchemy's ``sqlalchemy.engine`` logger,
            which logs every statement at INFO
    """
    level = level.upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "consultor_json": {"()": CustomJsonFormatter},
        },
        "filters": {
            "consultor_context": {"()": "sqlconsultor.logging.filters.ContextFilter"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "consultor_json",
                "filters": ["consultor_context"],
                "stream": "ext://sys.stdout",
            }
        },
        "loggers": {
            "sqlalchemy.engine": {"level": sqlalchemy_level.upper()},
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    })
