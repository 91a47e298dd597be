r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, check_delay_bounds


def fibonacci(n: int) -> int:
    """Return the ``n``-th Fibonacci number, 1-indexed (1, 1, 2, 3, 5...)."""
    a, b = 0, 1
    for _ in range(max(n, 0)):
        a, b = b, a + b
    return a


class FibonacciBackoff(BaseBackoffStrategy):
    """Fibonacci backoff strategy.

    Calculates delay as: ``base_delay * fibonacci(retry_index + 1)``, with an
    optional ``max_delay`` cap. Grows slower than exponential backoff.

    Args:
        base_delay: The delay unit in seconds.
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from aretry.backoff import FibonacciBackoff
        >>> backoff = FibonacciBackoff(base_delay=1.0, max_delay=10.0)
        >>> [backoff.calculate(i) for i in range(7)]
        [1.0, 1.0, 2.0, 3.0, 5.0, 8.0, 10.0]

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        check_delay_bounds(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def calculate(self, retry_index: int) -> float:
        return self._cap(self.base_delay * fibonacci(retry_index + 1))
