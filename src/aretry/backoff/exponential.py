r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, check_delay_bounds


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: ``base_delay * factor ** retry_index``, with an
    optional ``max_delay`` cap. This is the formula used by
    ``RetryOperation``, where ``base_delay`` is the ``min_timeout`` option.

    Args:
        base_delay: The delay before the first retry, in seconds.
        factor: The multiplier applied for each further retry. Must be >= 1.
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=1.0)
        >>> [backoff.calculate(i) for i in range(4)]
        [1.0, 2.0, 4.0, 8.0]
        >>> backoff = ExponentialBackoff(base_delay=0.5, factor=3, max_delay=5.0)
        >>> [backoff.calculate(i) for i in range(4)]
        [0.5, 1.5, 4.5, 5.0]

        ```
    """

    def __init__(
        self, base_delay: float = 1.0, factor: float = 2.0, max_delay: float | None = None
    ) -> None:
        check_delay_bounds(base_delay, max_delay)
        if factor < 1:
            msg = f"factor must be >= 1, got {factor}"
            raise ValueError(msg)

        self.base_delay = base_delay
        self.factor = factor
        self.max_delay = max_delay

    def calculate(self, retry_index: int) -> float:
        return self._cap(self.base_delay * self.factor**retry_index)
