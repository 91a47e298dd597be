r"""Constant backoff strategy."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from aretry.backoff.base import BaseBackoffStrategy


class ConstantBackoff(BaseBackoffStrategy):
    """Wait the same delay before every retry.

    Args:
        delay: The delay in seconds. Must be non-negative.

    Example:
        ```pycon
        >>> from aretry.backoff import ConstantBackoff
        >>> ConstantBackoff(delay=0.5).calculate(7)
        0.5

        ```
    """

    def __init__(self, delay: float = 1.0) -> None:
        if delay < 0:
            msg = f"delay must be non-negative, got {delay}"
            raise ValueError(msg)
        self.delay = delay

    def calculate(self, retry_index: int) -> float:  # noqa: ARG002
        return self.delay
