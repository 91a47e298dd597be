r"""Linear backoff strategy."""

from __future__ import annotations

__all__ = ["LinearBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, check_delay_bounds


class LinearBackoff(BaseBackoffStrategy):
    """Linear backoff strategy.

    Calculates delay as: ``base_delay * (retry_index + 1)``, with an
    optional ``max_delay`` cap.

    Args:
        base_delay: The delay step in seconds.
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from aretry.backoff import LinearBackoff
        >>> backoff = LinearBackoff(base_delay=2.0, max_delay=5.0)
        >>> [backoff.calculate(i) for i in range(4)]
        [2.0, 4.0, 5.0, 5.0]

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        check_delay_bounds(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def calculate(self, retry_index: int) -> float:
        return self._cap(self.base_delay * (retry_index + 1))
