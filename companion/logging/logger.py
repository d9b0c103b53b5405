"""
Structured JSON logging for the travel companion service.

Records are written to stdout as one JSON object per line. Besides the usual
level/logger/message fields, every record carries the travel operation that
emitted it (``insights``, ``itinerary``, ``translate``, ``converse``) and any
fields bound with ``log_context``, e.g. the destination or chat session id.
Retry warnings from deep inside the generation layer can then be traced back
to the request that caused them.
"""

from __future__ import annotations

import contextvars
import json
import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

_context: contextvars.ContextVar[dict[str, Any]] = contextvars.ContextVar(
    "companion_log_context", default={}
)

QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")


@contextmanager
def log_context(**fields: Any) -> Iterator[dict[str, Any]]:
    """
    Bind ``fields`` to every record logged inside the block.

    Nested blocks extend the outer context; ``None`` values are skipped.
    """
    merged = {**_context.get(), **{k: v for k, v in fields.items() if v is not None}}
    token = _context.set(merged)
    try:
        yield merged
    finally:
        _context.reset(token)


def current_context() -> dict[str, Any]:
    return dict(_context.get())


class JSONFormatter(logging.Formatter):

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self._service = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self._service,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_context.get())

        fields = getattr(record, "fields", None)
        if fields:
            entry["fields"] = fields
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(service_name: str, level_name: str | None = None) -> logging.Logger:
    """Route the root logger to stdout as JSON; call once from the lifespan."""
    level_name = (level_name or os.environ.get("LOG_LEVEL", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(service_name))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.info("Logging initialized", extra={"fields": {"level": level_name}})
    return logger
