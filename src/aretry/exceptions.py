r"""Exceptions raised by the retry orchestrator.

This module defines the error type that callers raise from their action
to stop retrying, as well as the errors the library raises itself.
"""

from __future__ import annotations

__all__ = ["AbortError", "HttpRequestError", "RetryOperationTimeoutError"]

import sys
from types import FrameType, TracebackType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def _call_site_traceback(frame: FrameType | None) -> TracebackType | None:
    """Build a traceback that ends at ``frame``."""
    tb = None
    while frame is not None:
        tb = TracebackType(tb, frame, frame.f_lasti, frame.f_lineno)
        frame = frame.f_back
    return tb


class AbortError(Exception):
    """Raise from an action to stop retrying immediately.

    The retry loop unwraps the instance and raises ``original_error`` to the
    caller, without consulting the retry budget or waiting for a backoff.

    Args:
        message: The error message, or an existing exception to surface
            as-is. When a string is given, a new ``Exception`` is created
            and carries the traceback of the abort call site.

    Attributes:
        original_error: The exception raised to the caller of ``retry``.

    Example:
        ```pycon
        >>> from aretry import AbortError
        >>> err = AbortError("stop now")
        >>> str(err)
        'stop now'
        >>> err.original_error
        Exception('stop now')
        >>> cause = ValueError("bad payload")
        >>> AbortError(cause).original_error is cause
        True

        ```
    """

    def __init__(self, message: str | BaseException) -> None:
        if isinstance(message, BaseException):
            self.original_error: BaseException = message
            message = str(message)
        else:
            self.original_error = Exception(message).with_traceback(
                _call_site_traceback(sys._getframe(1))  # noqa: SLF001
            )
        super().__init__(message)
        self.message = message


class RetryOperationTimeoutError(Exception):
    """Raised when an operation runs past its ``max_retry_time`` budget."""

    def __init__(self, message: str = "RetryOperation timeout occurred") -> None:
        super().__init__(message)


class HttpRequestError(Exception):
    """Error raised by ``request_async`` for a failed HTTP request.

    Args:
        method: The HTTP method (e.g. ``"GET"``).
        url: The requested URL.
        message: Human-readable description of the failure.
        status_code: The HTTP status code, if a response was received.
        response: The response object, if a response was received.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.response = response
        self.__cause__ = cause
