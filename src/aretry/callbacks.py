r"""Failed-attempt records and hook invocation.

This module provides the immutable record passed to the
``on_failed_attempt`` hook after each retryable failure, and the helper
that invokes the hook whether it is a plain function or a coroutine
function.

Example:
    ```pycon
    >>> from aretry.callbacks import FailedAttempt
    >>> def log_failure(failed: FailedAttempt) -> None:
    ...     print(
    ...         f"Attempt {failed.attempt_number} failed. "
    ...         f"There are {failed.retries_left} retries left."
    ...     )
    ...
    >>> log_failure(FailedAttempt(error=OSError("reset"), attempt_number=1, retries_left=4))
    Attempt 1 failed. There are 4 retries left.

    ```
"""

from __future__ import annotations

__all__ = ["FailedAttempt", "decorate_error", "invoke_on_failed_attempt"]

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from aretry.config import RetryOptions


@dataclass(frozen=True)
class FailedAttempt:
    """Information passed to the on_failed_attempt callback.

    Attributes:
        error: The exception raised by the action.
        attempt_number: The attempt that failed (1-indexed).
        retries_left: The number of retries still allowed by the budget,
            computed as ``retries - (attempt_number - 1)``.
    """

    error: BaseException
    attempt_number: int
    retries_left: int

    @property
    def message(self) -> str:
        """The message of the underlying error."""
        return str(self.error)


def decorate_error(error: BaseException, attempt_number: int, options: RetryOptions) -> FailedAttempt:
    """Attach the attempt counters to an error.

    The first attempt does not count as a retry, hence the ``- 1``.

    Args:
        error: The exception raised by the action.
        attempt_number: The attempt that failed (1-indexed).
        options: The options of the retry session.

    Returns:
        A new ``FailedAttempt``; ``error`` is left untouched.

    Example:
        ```pycon
        >>> from aretry.callbacks import decorate_error
        >>> from aretry.config import RetryOptions
        >>> failed = decorate_error(OSError("reset"), 3, RetryOptions(retries=5))
        >>> failed.attempt_number, failed.retries_left
        (3, 3)

        ```
    """
    return FailedAttempt(
        error=error,
        attempt_number=attempt_number,
        retries_left=options.retries - (attempt_number - 1),
    )


async def invoke_on_failed_attempt(options: RetryOptions, failed: FailedAttempt) -> None:
    """Invoke the on_failed_attempt callback if provided.

    The result of the callback is awaited when it is awaitable. Exceptions
    raised by the callback propagate to the caller.

    Args:
        options: The options holding the callback.
        failed: The failed-attempt record to pass.
    """
    if options.on_failed_attempt is None:
        return
    result = options.on_failed_attempt(failed)
    if inspect.isawaitable(result):
        await result
