r"""aretry - Retry orchestrator for asynchronous operations.

This package calls a fallible async action until it succeeds, runs out of
retries, or is explicitly aborted, waiting a configurable backoff delay
between attempts. It is meant for network calls, flaky I/O, and any other
operation subject to transient failures.

Key Features:
    - A single ``retry`` call encapsulating the retry policy
    - ``AbortError`` to stop retrying from within the action
    - ``TypeError`` treated as a bug and never retried, with a configurable
      predicate for network errors reported as ``TypeError``
    - ``on_failed_attempt`` hook receiving the attempt counters
    - Pluggable operations and backoff strategies (exponential, linear,
      Fibonacci, constant), with optional randomization and time budget
    - Retried HTTP requests on top of httpx (``aretry.http``, installed
      with the ``http`` extra)

Example:
    ```pycon
    >>> import asyncio
    >>> from aretry import FailedAttempt, retry
    >>> async def fetch_unicorn(attempt_number: int) -> str:
    ...     if attempt_number < 3:
    ...         raise ConnectionError("service unavailable")
    ...     return "unicorn"
    ...
    >>> def log_failure(failed: FailedAttempt) -> None:
    ...     print(
    ...         f"Attempt {failed.attempt_number} failed. "
    ...         f"There are {failed.retries_left} retries left."
    ...     )
    ...
    >>> asyncio.run(
    ...     retry(fetch_unicorn, retries=5, min_timeout=0, on_failed_attempt=log_failure)
    ... )
    Attempt 1 failed. There are 5 retries left.
    Attempt 2 failed. There are 4 retries left.
    'unicorn'

    ```
"""

from __future__ import annotations

__all__ = [
    "AbortError",
    "BaseOperation",
    "FailedAttempt",
    "HttpRequestError",
    "RetryController",
    "RetryOperation",
    "RetryOperationTimeoutError",
    "RetryOptions",
    "__version__",
    "retry",
    "retrying",
]

from importlib.metadata import PackageNotFoundError, version

from aretry.callbacks import FailedAttempt
from aretry.config import RetryOptions
from aretry.core import RetryController, retry, retrying
from aretry.exceptions import AbortError, HttpRequestError, RetryOperationTimeoutError
from aretry.operation import BaseOperation, RetryOperation

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
