r"""Test doubles shared by the unit tests."""

from __future__ import annotations

__all__ = ["AlwaysFailing", "FlakyAction", "ManualOperation"]

import asyncio
from typing import Any

from aretry.operation import BaseOperation


class FlakyAction:
    """Async action raising the given errors, then returning ``value``.

    Attributes:
        calls: The attempt numbers the action was called with.
    """

    def __init__(self, *errors: BaseException, value: Any = "ok") -> None:
        self._errors = list(errors)
        self._value = value
        self.calls: list[int] = []

    async def __call__(self, attempt_number: int) -> Any:
        self.calls.append(attempt_number)
        if self._errors:
            raise self._errors.pop(0)
        return self._value

    @property
    def call_count(self) -> int:
        return len(self.calls)


class AlwaysFailing:
    """Async action that always raises ``error``."""

    def __init__(self, error: BaseException) -> None:
        self.error = error
        self.calls: list[int] = []

    async def __call__(self, attempt_number: int) -> Any:
        self.calls.append(attempt_number)
        raise self.error

    @property
    def call_count(self) -> int:
        return len(self.calls)


class ManualOperation(BaseOperation):
    """Operation retrying immediately up to ``max_retries`` times.

    It records every call made by the controller, so tests can check the
    protocol without depending on ``RetryOperation``.
    """

    def __init__(self, max_retries: int) -> None:
        self.max_retries = max_retries
        self.retried: list[BaseException] = []
        self.stop_calls = 0
        self._attempts = 0
        self._callback = None

    @property
    def attempts(self) -> int:
        return self._attempts

    def attempt(self, callback: Any) -> None:
        self._callback = callback
        asyncio.create_task(self._run())

    def retry(self, error: BaseException) -> bool:
        self.retried.append(error)
        if len(self.retried) > self.max_retries:
            return False
        asyncio.create_task(self._run())
        return True

    def stop(self) -> None:
        self.stop_calls += 1

    def get_main_error(self) -> BaseException | None:
        return self.retried[0] if self.retried else None

    async def _run(self) -> None:
        self._attempts += 1
        await self._callback(self._attempts)
