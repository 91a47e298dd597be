r"""Parameter validation for retry options.

This module checks the retry budget and the backoff policy before a
retry session starts, so invalid values fail at configuration time
rather than in the middle of the attempt loop.
"""

from __future__ import annotations

__all__ = ["validate_retry_params"]


def validate_retry_params(
    retries: int,
    factor: float = 2.0,
    min_timeout: float = 1.0,
    max_timeout: float | None = None,
    max_retry_time: float | None = None,
) -> None:
    """Validate retry parameters.

    Args:
        retries: Maximum number of retries after the first attempt.
            Must be >= 0. A value of 0 means only the initial attempt.
        factor: Exponential growth factor of the delay. Must be >= 1.
        min_timeout: Delay before the first retry, in seconds.
            Must be >= 0.
        max_timeout: Maximum delay between two attempts, in seconds.
            Must be > 0 and >= ``min_timeout`` if provided.
        max_retry_time: Maximum time budget for the whole session,
            in seconds. Must be > 0 if provided.

    Raises:
        ValueError: If one of the parameters is out of range.

    Example:
        ```pycon
        >>> from aretry.validation import validate_retry_params
        >>> validate_retry_params(retries=3)
        >>> validate_retry_params(retries=3, factor=1.5, max_timeout=10.0)
        >>> validate_retry_params(retries=-1)
        Traceback (most recent call last):
        ...
        ValueError: retries must be >= 0, got -1

        ```
    """
    if isinstance(retries, bool) or not isinstance(retries, int):
        msg = f"retries must be an integer, got {retries!r}"
        raise TypeError(msg)
    if retries < 0:
        msg = f"retries must be >= 0, got {retries}"
        raise ValueError(msg)
    if factor < 1:
        msg = f"factor must be >= 1, got {factor}"
        raise ValueError(msg)
    if min_timeout < 0:
        msg = f"min_timeout must be >= 0, got {min_timeout}"
        raise ValueError(msg)
    if max_timeout is not None:
        if max_timeout <= 0:
            msg = f"max_timeout must be > 0, got {max_timeout}"
            raise ValueError(msg)
        if max_timeout < min_timeout:
            msg = f"max_timeout ({max_timeout}) must be >= min_timeout ({min_timeout})"
            raise ValueError(msg)
    if max_retry_time is not None and max_retry_time <= 0:
        msg = f"max_retry_time must be > 0, got {max_retry_time}"
        raise ValueError(msg)
