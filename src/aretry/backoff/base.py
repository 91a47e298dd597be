r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "check_delay_bounds"]

from abc import ABC, abstractmethod


def check_delay_bounds(base_delay: float, max_delay: float | None) -> None:
    """Validate the common ``base_delay``/``max_delay`` pair.

    Raises:
        ValueError: If ``base_delay`` is negative or ``max_delay`` is
            not positive.
    """
    if base_delay < 0:
        msg = f"base_delay must be non-negative, got {base_delay}"
        raise ValueError(msg)
    if max_delay is not None and max_delay <= 0:
        msg = f"max_delay must be positive if specified, got {max_delay}"
        raise ValueError(msg)


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy maps the index of a retry to the number of seconds
    to wait before running it. It is stateless: the operation that owns it
    keeps track of how many retries were scheduled.
    """

    max_delay: float | None = None

    @abstractmethod
    def calculate(self, retry_index: int) -> float:
        """Calculate the delay before a retry.

        Args:
            retry_index: The 0-based index of the retry. ``0`` is the
                delay between the first and the second attempt.

        Returns:
            The delay in seconds.
        """

    def _cap(self, delay: float) -> float:
        if self.max_delay is not None:
            return min(delay, self.max_delay)
        return delay
