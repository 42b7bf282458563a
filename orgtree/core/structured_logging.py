"""JSON line logging with request correlation.

Every log line is a single JSON object so any collector can ingest it. The
correlation id of the current HTTP request (if any) is attached automatically.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def new_correlation_id() -> str:
    return str(uuid4())


@contextmanager
def correlation_context(correlation_id: str | None):
    """Bind ``correlation_id`` to log lines emitted inside the block."""

    token = _correlation_id.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id.reset(token)


def configure_logging(level: str = "INFO") -> None:
    """Route ``orgtree`` loggers to stderr with the message as-is."""

    root = logging.getLogger("orgtree")
    root.setLevel(level.upper())
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)


def log_json(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """Emit a single JSON log line with the optional correlation id."""

    payload: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "event": event,
    }
    correlation_id = get_correlation_id()
    if correlation_id:
        payload["request_id"] = correlation_id

    payload.update(fields)
    logger.log(level, json.dumps(payload, default=str))
