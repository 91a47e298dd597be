r"""Configuration dataclass and defaults for retry sessions.

This module provides the default retry policy and the ``RetryOptions``
dataclass consumed by ``retry`` and ``RetryController``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_FACTOR",
    "DEFAULT_MIN_TIMEOUT",
    "DEFAULT_RETRIES",
    "FETCH_FAILURE_MESSAGE",
    "RetryOptions",
    "is_fetch_failure",
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from aretry.operation import RetryOperation
from aretry.validation import validate_retry_params

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.backoff import BaseBackoffStrategy
    from aretry.callbacks import FailedAttempt
    from aretry.operation.base import BaseOperation


# Default maximum number of retries
# Total attempts = retries + 1 (initial attempt)
DEFAULT_RETRIES = 10

# Default exponential backoff: 1s, 2s, 4s, 8s...
DEFAULT_FACTOR = 2.0
DEFAULT_MIN_TIMEOUT = 1.0

# Some fetch implementations report a connectivity failure as a TypeError
# with this message. The wording differs between platforms.
FETCH_FAILURE_MESSAGE = "Failed to fetch"


def is_fetch_failure(error: TypeError) -> bool:
    """Return ``True`` if a ``TypeError`` reports a failed network fetch.

    This is the default network-error predicate. It matches the message
    exactly, so a ``TypeError`` phrased differently by another runtime is
    treated as a programmer error. Pass ``is_network_error`` to change it.

    Example:
        ```pycon
        >>> from aretry.config import is_fetch_failure
        >>> is_fetch_failure(TypeError("Failed to fetch"))
        True
        >>> is_fetch_failure(TypeError("NetworkError when attempting to fetch resource."))
        False

        ```
    """
    return str(error) == FETCH_FAILURE_MESSAGE


@dataclass(frozen=True)
class RetryOptions:
    """Options of a retry session.

    ``retries`` and the hooks are used by the retry controller. The backoff
    parameters are not read by the controller: they are forwarded to the
    operation that schedules the attempts.

    Args:
        retries: Maximum number of retries after the first attempt.
        on_failed_attempt: Optional callback invoked with a
            ``FailedAttempt`` after each retryable failure. It may be a
            coroutine function. If it raises, retrying stops and the
            exception propagates.
        is_network_error: Predicate deciding whether a ``TypeError`` is a
            transient network failure rather than a programmer error.
        factor: Exponential growth factor of the delay.
        min_timeout: Delay before the first retry, in seconds.
        max_timeout: Optional cap on a single delay, in seconds.
        randomize: Multiply each delay by a random factor in ``[1, 2)``.
        forever: Keep retrying with the last delay once the budget is spent.
        max_retry_time: Optional time budget for the whole session, in seconds.
        backoff_strategy: Optional custom delay formula. Replaces the
            exponential formula built from ``factor``, ``min_timeout`` and
            ``max_timeout``.
        operation_factory: Optional callable building the operation from
            these options. Defaults to ``RetryOperation``.

    Example:
        ```pycon
        >>> from aretry.config import RetryOptions
        >>> options = RetryOptions()
        >>> options.retries
        10
        >>> options = RetryOptions(retries=5, min_timeout=0.1)
        >>> options.merge(retries=2).retries
        2
        >>> options.retries
        5

        ```
    """

    retries: int = DEFAULT_RETRIES
    on_failed_attempt: Callable[[FailedAttempt], Awaitable[None] | None] | None = None
    is_network_error: Callable[[TypeError], bool] = is_fetch_failure
    factor: float = DEFAULT_FACTOR
    min_timeout: float = DEFAULT_MIN_TIMEOUT
    max_timeout: float | None = None
    randomize: bool = False
    forever: bool = False
    max_retry_time: float | None = None
    backoff_strategy: BaseBackoffStrategy | None = None
    operation_factory: Callable[[RetryOptions], BaseOperation] | None = None

    def __post_init__(self) -> None:
        validate_retry_params(
            retries=self.retries,
            factor=self.factor,
            min_timeout=self.min_timeout,
            max_timeout=self.max_timeout,
            max_retry_time=self.max_retry_time,
        )

    def merge(self, **overrides: Any) -> RetryOptions:
        """Create new options with the given fields overridden.

        Every given field is applied, ``None`` included: ``max_timeout=None``
        removes the cap, and ``retries=None`` is rejected by validation.

        Returns:
            A new validated ``RetryOptions`` instance.

        Raises:
            TypeError: If a field name is unknown or ``retries`` is not an
                integer.
            ValueError: If an overridden value is out of range.
        """
        return replace(self, **overrides)

    def create_operation(self) -> BaseOperation:
        """Build the operation that schedules the attempts of a session."""
        if self.operation_factory is not None:
            return self.operation_factory(self)
        return RetryOperation.from_options(self)
