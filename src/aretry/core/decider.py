r"""Classification of attempt failures.

This module provides the single function deciding which failures are
retried. Operations only count and schedule attempts; they never
classify errors.
"""

from __future__ import annotations

__all__ = ["classify_failure", "non_error_raised"]

import logging
from typing import TYPE_CHECKING

from aretry.config import is_fetch_failure
from aretry.core.outcome import AbortRequest, ProgrammerError, Transient
from aretry.exceptions import AbortError

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.core.outcome import Outcome

logger: logging.Logger = logging.getLogger(__name__)


def non_error_raised(value: object) -> TypeError:
    """Create the error reported when a failure is not an exception."""
    return TypeError(f'Non-error was thrown: "{value}". You should only throw errors.')


def classify_failure(
    failure: object,
    is_network_error: Callable[[TypeError], bool] = is_fetch_failure,
) -> Outcome:
    """Classify the failure of an attempt.

    The rules are applied in order:

    1. anything that is not an ``Exception`` is a programmer error,
       reported as a ``TypeError``;
    2. an ``AbortError`` is an abort request for its ``original_error``;
    3. a ``TypeError`` is a programmer error, unless
       ``is_network_error`` recognizes it as a network failure;
    4. any other exception is transient.

    Args:
        failure: The object raised by the action.
        is_network_error: Predicate for ``TypeError`` instances that
            report a network failure.

    Returns:
        The outcome variant of the failure.

    Example:
        ```pycon
        >>> from aretry.core.decider import classify_failure
        >>> classify_failure(ConnectionResetError("reset"))
        Transient(error=ConnectionResetError('reset'))
        >>> classify_failure(TypeError("bad input"))
        ProgrammerError(error=TypeError('bad input'))
        >>> classify_failure(TypeError("Failed to fetch"))
        Transient(error=TypeError('Failed to fetch'))

        ```
    """
    if not isinstance(failure, Exception):
        logger.debug(f"Non-error failure: {failure!r}")
        return ProgrammerError(non_error_raised(failure))
    if isinstance(failure, AbortError):
        return AbortRequest(failure.original_error)
    if isinstance(failure, TypeError) and not is_network_error(failure):
        return ProgrammerError(failure)
    return Transient(failure)
