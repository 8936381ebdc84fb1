"""JSON logging for the wardrobe planner.

Every catalog event is a single JSON line carrying the event name, the active
correlation id and the event's keyword fields. Photo URIs and wearer details
are scrubbed before they reach a handler.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import uuid
from typing import Any, Dict, Iterator, Mapping

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Item and wearer fields that never appear in logs.
_SENSITIVE_FIELDS = frozenset({"image_uri", "imageUri", "brand", "size", "age"})
_URI_PREFIXES = ("http://", "https://", "file:", "content:", "ph://", "data:")
_EMAIL = re.compile(r"[\w.+\-]+@[\w\-]+(\.[\w\-]+)+")

REDACTED = "[redacted]"


def _scrub_text(text: str) -> str:
    if text.lower().startswith(_URI_PREFIXES):
        return "[redacted-uri]"
    return _EMAIL.sub("[redacted-email]", text)


def redact_for_log(value: Any) -> Any:
    """Return a JSON-friendly copy of ``value`` with sensitive data masked."""

    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        return _scrub_text(value)
    if isinstance(value, Mapping):
        return {
            key: REDACTED if key in _SENSITIVE_FIELDS else redact_for_log(inner)
            for key, inner in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [redact_for_log(inner) for inner in value]
    return _scrub_text(str(value))


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra`` fields become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", message),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        fields = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES}
        for key, value in redact_for_log(fields).items():
            payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _PlannerHandler(logging.StreamHandler):
    """Marker type so reconfiguration only replaces our own handler."""


def configure_logging(level: int | str | None = None) -> None:
    """Install the JSON handler on the root logger, replacing a previous one."""

    root = logging.getLogger()
    for handler in [h for h in root.handlers if isinstance(h, _PlannerHandler)]:
        root.removeHandler(handler)
    handler = _PlannerHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Bind ``correlation_id`` (or keep the current one, or mint one) and return it."""

    if not correlation_id:
        correlation_id = CORRELATION_ID.get() or uuid.uuid4().hex
    if CORRELATION_ID.get() != correlation_id:
        CORRELATION_ID.set(correlation_id)
    return correlation_id


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id; the previous one is restored on exit."""

    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with redacted keyword fields attached as record attributes.

    ``exc_info`` is forwarded to the logger; ``correlation_id`` overrides the
    scoped id. Field names must not collide with LogRecord attributes.
    """

    exc_info = fields.pop("exc_info", None)
    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    extra = {"event": event, "correlation_id": correlation_id}
    extra.update(redact_for_log(fields))
    logger.log(level, event, exc_info=exc_info, extra=extra)


@contextlib.contextmanager
def operation_context(name: str, correlation_id: str | None = None) -> Iterator[str]:
    """Run a named unit of work (startup, a request) under a fresh correlation id."""

    with correlation_context(correlation_id or uuid.uuid4().hex) as scoped_id:
        log_event(logging.getLogger(__name__), logging.DEBUG, "operation_scope_opened", operation=name)
        yield scoped_id


__all__ = [
    "CORRELATION_ID",
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
