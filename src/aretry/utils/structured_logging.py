r"""Structured logging utilities for retry sessions.

The library logs through the standard ``logging`` module under the
``aretry`` logger. This module provides an opt-in JSON formatter and a
session ID bound to each retry session, so that all the log records of
one ``retry`` call can be grouped by a log aggregation system.

Example:
    Enable structured logging for aretry:

    ```python
    import logging
    from aretry.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("aretry")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "bind_session_id",
    "clear_session_id",
    "get_session_id",
    "log_structured",
    "set_session_id",
]

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

# Asyncio tasks copy the context when they are created, so every attempt
# of a session sees the session ID set before its first attempt.
_session_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "aretry_session_id", default=None
)

# Attributes set on every LogRecord, i.e. not passed through ``extra``.
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def get_session_id() -> str | None:
    """Get the ID of the current retry session, or ``None``.

    Example:
        ```pycon
        >>> from aretry.utils.structured_logging import get_session_id, set_session_id
        >>> set_session_id("sess-1")
        >>> get_session_id()
        'sess-1'

        ```
    """
    return _session_id.get()


def set_session_id(session_id: str) -> None:
    """Set the session ID for the current context."""
    _session_id.set(session_id)


def clear_session_id() -> None:
    """Clear the session ID for the current context."""
    _session_id.set(None)


@contextmanager
def bind_session_id(session_id: str) -> Iterator[str]:
    """Set the session ID for the duration of a ``with`` block.

    The previous value is restored on exit.

    Example:
        ```pycon
        >>> from aretry.utils.structured_logging import bind_session_id, get_session_id
        >>> with bind_session_id("sess-2"):
        ...     get_session_id()
        ...
        'sess-2'

        ```
    """
    token = _session_id.set(session_id)
    try:
        yield session_id
    finally:
        _session_id.reset(token)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each record becomes a JSON object with the fields ``timestamp``,
    ``level``, ``logger``, ``message``, ``module``, ``function`` and
    ``line``, plus ``session_id`` inside a retry session, ``exception``
    when exception info is attached, and every field passed through the
    ``extra`` argument of the logging call. Values that are not JSON
    serializable are rendered with ``str``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        session_id = get_session_id()
        if session_id is not None:
            log_data["session_id"] = session_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002, N802
        """Format the record time as ISO 8601 in UTC, ignoring ``datefmt``."""
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., ``logging.INFO``).
        message: Log message.
        **extra: Fields included in the JSON output of
            ``StructuredFormatter``.
    """
    logger.log(level, message, extra=extra)
