r"""Default operation based on a precomputed list of delays.

This module provides ``RetryOperation``, which runs each attempt in an
asyncio task and waits a backoff delay before every retry.
"""

from __future__ import annotations

__all__ = ["RetryOperation", "create_timeouts"]

import asyncio
import logging
import random
import time
from collections import Counter
from typing import TYPE_CHECKING

from aretry.backoff import BaseBackoffStrategy, ExponentialBackoff
from aretry.exceptions import RetryOperationTimeoutError
from aretry.operation.base import BaseOperation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from aretry.config import RetryOptions
    from aretry.operation.base import AttemptCallback

logger: logging.Logger = logging.getLogger(__name__)


def create_timeouts(
    retries: int,
    backoff_strategy: BaseBackoffStrategy,
    randomize: bool = False,
    forever: bool = False,
) -> list[float]:
    """Compute the delays to wait before each retry.

    When ``randomize`` is set, each delay is multiplied by a random factor in
    ``[1, 2)`` before the strategy cap is applied, and the list is sorted so
    that delays never shrink. With ``forever`` and no retries, a single delay
    is still computed so that the operation has something to repeat.

    Args:
        retries: The number of retries.
        backoff_strategy: The delay formula.
        randomize: Whether to randomize the delays.
        forever: Whether the operation retries forever.

    Returns:
        The delays in seconds, one per retry.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> from aretry.operation import create_timeouts
        >>> create_timeouts(4, ExponentialBackoff(base_delay=0.5, max_delay=3.0))
        [0.5, 1.0, 2.0, 3.0]
        >>> create_timeouts(0, ExponentialBackoff(), forever=True)
        [1.0]

        ```
    """
    count = retries if retries or not forever else 1
    timeouts = []
    for index in range(count):
        delay = backoff_strategy.calculate(index)
        if randomize:
            delay *= random.uniform(1, 2)  # noqa: S311
            if backoff_strategy.max_delay is not None:
                delay = min(delay, backoff_strategy.max_delay)
        timeouts.append(delay)
    return sorted(timeouts)


class RetryOperation(BaseOperation):
    """Operation that waits a precomputed delay before each retry.

    Each attempt runs in its own asyncio task; the delay before a retry is
    awaited in the task of that retry, so ``stop`` only has to cancel the
    pending task.

    Args:
        timeouts: The delays in seconds, one per allowed retry.
        forever: Reuse the last delay once ``timeouts`` is exhausted
            instead of giving up.
        max_retry_time: Optional time budget in seconds, measured from the
            first attempt. Once reached, ``retry`` gives up and the main
            error becomes a ``RetryOperationTimeoutError``.

    Example:
        ```pycon
        >>> from aretry.operation import RetryOperation
        >>> operation = RetryOperation([0.1, 0.2])
        >>> operation.attempts
        0
        >>> operation.timeouts
        [0.1, 0.2]

        ```
    """

    def __init__(
        self,
        timeouts: Sequence[float],
        forever: bool = False,
        max_retry_time: float | None = None,
    ) -> None:
        self._original_timeouts = list(timeouts)
        self._timeouts = list(timeouts)
        self._cached_timeouts = list(timeouts) if forever else None
        self._max_retry_time = max_retry_time
        self._errors: list[BaseException] = []
        self._timeout_error: RetryOperationTimeoutError | None = None
        self._attempts = 0
        self._callback: AttemptCallback | None = None
        self._operation_start: float | None = None
        self._task: asyncio.Task | None = None

    @classmethod
    def from_options(cls, options: RetryOptions) -> RetryOperation:
        """Create an operation from the backoff policy of retry options."""
        strategy = options.backoff_strategy or ExponentialBackoff(
            base_delay=options.min_timeout,
            factor=options.factor,
            max_delay=options.max_timeout,
        )
        return cls(
            create_timeouts(
                options.retries,
                strategy,
                randomize=options.randomize,
                forever=options.forever,
            ),
            forever=options.forever,
            max_retry_time=options.max_retry_time,
        )

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def timeouts(self) -> list[float]:
        """The delays left for the next retries."""
        return list(self._timeouts)

    def errors(self) -> list[BaseException]:
        """Return the errors recorded so far, oldest first."""
        return list(self._errors)

    def attempt(self, callback: AttemptCallback) -> None:
        self._callback = callback
        self._operation_start = time.monotonic()
        self._task = asyncio.create_task(self._run_attempt(delay=None))

    def retry(self, error: BaseException) -> bool:
        if self._operation_start is None:
            msg = "retry() called before attempt()"
            raise RuntimeError(msg)

        if self._max_retry_time is not None:
            elapsed = time.monotonic() - self._operation_start
            if elapsed >= self._max_retry_time:
                self._errors.append(error)
                self._timeout_error = RetryOperationTimeoutError()
                self._timeout_error.__cause__ = error
                logger.debug(
                    f"Giving up after {elapsed:.2f}s (max_retry_time={self._max_retry_time:.2f}s)"
                )
                return False

        self._errors.append(error)
        if self._timeouts:
            delay = self._timeouts.pop(0)
        elif self._cached_timeouts:
            # Only the latest error matters when retrying forever.
            del self._errors[:-1]
            delay = self._cached_timeouts[-1]
        else:
            logger.debug(f"No retry left after {self._attempts} attempts")
            return False

        logger.debug(f"Scheduling attempt {self._attempts + 1} in {delay:.2f}s")
        self._task = asyncio.create_task(self._run_attempt(delay=delay))
        return True

    def stop(self) -> None:
        task = self._task
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()

    def reset(self) -> None:
        """Restore the initial schedule and forget the recorded errors."""
        self.stop()
        self._attempts = 0
        self._timeouts = list(self._original_timeouts)
        self._errors = []
        self._timeout_error = None
        self._operation_start = None

    def get_main_error(self) -> BaseException | None:
        """Return the most frequent error.

        Errors are compared by message; on a tie the most recent error is
        returned. If the time budget was exceeded, the timeout error is
        returned instead.
        """
        if self._timeout_error is not None:
            return self._timeout_error
        counts: Counter[str] = Counter()
        main_error = None
        main_count = 0
        for error in self._errors:
            message = str(error)
            counts[message] += 1
            if counts[message] >= main_count:
                main_error = error
                main_count = counts[message]
        return main_error

    async def _run_attempt(self, delay: float | None) -> None:
        if delay is not None:
            await asyncio.sleep(delay)
        self._attempts += 1
        await self._callback(self._attempts)
