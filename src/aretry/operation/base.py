r"""Abstract base class for operations."""

from __future__ import annotations

__all__ = ["AttemptCallback", "BaseOperation"]

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

AttemptCallback = Callable[[int], Awaitable[None]]


class BaseOperation(ABC):
    """Abstract base class for operations.

    The retry controller only talks to an operation through this
    interface, so the scheduling policy (exponential, linear, jittered,
    time-boxed...) can change without touching the controller. The
    controller classifies failures itself: an operation never looks at
    an error beyond recording it.
    """

    @property
    @abstractmethod
    def attempts(self) -> int:
        """The number of attempts started so far."""

    @abstractmethod
    def attempt(self, callback: AttemptCallback) -> None:
        """Start the first attempt.

        Args:
            callback: Coroutine function called with the 1-based attempt
                number. It is called again for every granted retry.
        """

    @abstractmethod
    def retry(self, error: BaseException) -> bool:
        """Record a failure and schedule another attempt if allowed.

        Args:
            error: The error raised by the failed attempt.

        Returns:
            ``True`` if another attempt was scheduled, ``False`` if the
            operation gave up.
        """

    @abstractmethod
    def stop(self) -> None:
        """Cancel any pending scheduled attempt."""

    @abstractmethod
    def get_main_error(self) -> BaseException | None:
        """Return the error to report once the operation gave up."""
