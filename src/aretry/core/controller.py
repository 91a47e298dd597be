r"""Retry controller for asynchronous actions.

This module implements the retry loop: it runs the action through an
operation, classifies each failure, invokes the ``on_failed_attempt``
hook, and settles the result of the session exactly once.
"""

from __future__ import annotations

__all__ = ["RetryController", "retry", "retrying"]

import asyncio
import functools
import inspect
import logging
import uuid
from typing import TYPE_CHECKING, Any, TypeVar

from aretry.callbacks import decorate_error, invoke_on_failed_attempt
from aretry.config import RetryOptions
from aretry.core.decider import classify_failure
from aretry.core.outcome import AbortRequest, ProgrammerError, Success, Transient
from aretry.utils.structured_logging import bind_session_id, log_structured

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.core.outcome import Outcome
    from aretry.operation import BaseOperation

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)

# Raised through the attempt task instead of being classified.
_PROPAGATED = (asyncio.CancelledError, KeyboardInterrupt, SystemExit, GeneratorExit)


class RetryController:
    """Run asynchronous actions until they succeed or retrying stops.

    Each call to ``run`` is an independent session with its own operation,
    so a controller can be reused and shared between tasks.

    Args:
        options: The retry options. Defaults to ``RetryOptions()``.
        **kwargs: Fields overriding ``options``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import RetryController
        >>> async def flaky(attempt_number: int) -> str:
        ...     if attempt_number < 3:
        ...         raise ConnectionError("try again")
        ...     return f"done after {attempt_number} attempts"
        ...
        >>> controller = RetryController(retries=5, min_timeout=0)
        >>> asyncio.run(controller.run(flaky))
        'done after 3 attempts'

        ```
    """

    def __init__(self, options: RetryOptions | None = None, **kwargs: Any) -> None:
        options = options if options is not None else RetryOptions()
        self.options: RetryOptions = options.merge(**kwargs) if kwargs else options

    async def run(self, action: Callable[[int], Awaitable[T] | T]) -> T:
        """Run ``action`` until it succeeds or retrying stops.

        Args:
            action: Callable receiving the 1-based attempt number. It may
                return an awaitable, which is awaited.

        Returns:
            The value of the first successful attempt.

        Raises:
            TypeError: If the action raised a ``TypeError`` that is not a
                network failure, or a ``BaseException`` that is not an
                ``Exception``. ``CancelledError``, ``KeyboardInterrupt``,
                ``SystemExit`` and ``GeneratorExit`` are re-raised as-is.
            Exception: The ``original_error`` of an ``AbortError``, the
                exception raised by ``on_failed_attempt``, or the main
                error of the operation once it gives up.
        """
        options = self.options
        operation = options.create_operation()
        result: asyncio.Future = asyncio.get_running_loop().create_future()

        async def run_attempt(attempt_number: int) -> None:
            try:
                outcome = await self._call(action, attempt_number)
                if not result.done():
                    await self._settle(outcome, attempt_number, operation, result)
            except asyncio.CancelledError:
                result.cancel()
                raise
            except BaseException as exc:  # noqa: BLE001
                _reject(result, exc)
                if isinstance(exc, _PROPAGATED):
                    raise

        with bind_session_id(uuid.uuid4().hex):
            logger.debug(f"Starting retry session (retries={options.retries})")
            operation.attempt(run_attempt)
        try:
            return await result
        finally:
            operation.stop()

    async def _call(self, action: Callable[[int], Any], attempt_number: int) -> Outcome:
        logger.debug(f"Attempt {attempt_number}/{self.options.retries + 1}")
        try:
            value = action(attempt_number)
            if inspect.isawaitable(value):
                value = await value
        except _PROPAGATED:
            raise
        except BaseException as exc:  # noqa: BLE001
            return classify_failure(exc, self.options.is_network_error)
        return Success(value)

    async def _settle(
        self,
        outcome: Outcome,
        attempt_number: int,
        operation: BaseOperation,
        result: asyncio.Future,
    ) -> None:
        if isinstance(outcome, Success):
            logger.debug(f"Attempt {attempt_number} succeeded")
            result.set_result(outcome.value)
        elif isinstance(outcome, AbortRequest):
            logger.debug(f"Attempt {attempt_number} aborted: {outcome.original!r}")
            operation.stop()
            _reject(result, outcome.original)
        elif isinstance(outcome, ProgrammerError):
            logger.debug(f"Attempt {attempt_number} raised a non-retryable error: {outcome.error!r}")
            operation.stop()
            _reject(result, outcome.error)
        elif isinstance(outcome, Transient):
            failed = decorate_error(outcome.error, attempt_number, self.options)
            logger.debug(
                f"Attempt {attempt_number} failed ({outcome.error!r}), "
                f"{failed.retries_left} retries left"
            )
            try:
                await invoke_on_failed_attempt(self.options, failed)
            except Exception as exc:  # noqa: BLE001
                logger.debug(f"on_failed_attempt raised {exc!r}, no more retries")
                _reject(result, exc)
                return
            if not operation.retry(outcome.error):
                main_error = operation.get_main_error()
                log_structured(
                    logger,
                    logging.DEBUG,
                    f"Giving up after {attempt_number} attempts",
                    attempts=attempt_number,
                    main_error=repr(main_error),
                )
                _reject(result, main_error if main_error is not None else outcome.error)
        else:
            msg = f"Unknown attempt outcome: {outcome!r}"
            raise TypeError(msg)


def _reject(result: asyncio.Future, error: BaseException) -> None:
    if not result.done():
        result.set_exception(error)


async def retry(
    action: Callable[[int], Awaitable[T] | T],
    options: RetryOptions | None = None,
    **kwargs: Any,
) -> T:
    """Call ``action`` until it succeeds, retrying transient failures.

    ``action`` receives the attempt number, starting at 1. It is retried
    up to ``retries`` times (10 by default) with exponential backoff. It
    is not retried when it raises ``AbortError`` (the wrapped error is
    raised instead) or a ``TypeError``, which denotes a bug. The exception
    is a ``TypeError`` accepted by ``is_network_error``: by default one
    whose message is exactly ``"Failed to fetch"``. Other runtimes may
    report the same network condition with another message.

    Args:
        action: Callable receiving the 1-based attempt number. It may
            return an awaitable, which is awaited.
        options: The retry options. Defaults to ``RetryOptions()``.
        **kwargs: Fields overriding ``options``, e.g. ``retries=5`` or
            ``on_failed_attempt=log_failure``.

    Returns:
        The value of the first successful attempt.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import AbortError, retry
        >>> async def fetch(attempt_number: int) -> str:
        ...     raise AbortError(LookupError("unknown resource"))
        ...
        >>> asyncio.run(retry(fetch, retries=5))
        Traceback (most recent call last):
        ...
        LookupError: unknown resource

        ```
    """
    return await RetryController(options, **kwargs).run(action)


def retrying(
    options: RetryOptions | None = None, **kwargs: Any
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorate a coroutine function so that each call is retried.

    The attempt number is passed as the ``attempt_number`` keyword argument
    when the decorated function declares such a parameter.

    Args:
        options: The retry options. Defaults to ``RetryOptions()``.
        **kwargs: Fields overriding ``options``.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import retrying
        >>> @retrying(retries=3, min_timeout=0)
        ... async def read(path: str, attempt_number: int) -> str:
        ...     if attempt_number == 1:
        ...         raise OSError("busy")
        ...     return f"{path} read on attempt {attempt_number}"
        ...
        >>> asyncio.run(read("data.bin"))
        'data.bin read on attempt 2'

        ```
    """
    controller = RetryController(options, **kwargs)

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        passes_attempt = "attempt_number" in inspect.signature(func).parameters

        @functools.wraps(func)
        async def wrapper(*args: Any, **func_kwargs: Any) -> T:
            def action(attempt_number: int) -> Awaitable[T]:
                if passes_attempt:
                    return func(*args, attempt_number=attempt_number, **func_kwargs)
                return func(*args, **func_kwargs)

            return await controller.run(action)

        return wrapper

    return decorator
