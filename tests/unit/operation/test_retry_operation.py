r"""Unit tests for the default retry operation."""

from __future__ import annotations

import asyncio
from unittest.mock import Mock, call, patch

import pytest

from aretry.backoff import ConstantBackoff, ExponentialBackoff, LinearBackoff
from aretry.config import RetryOptions
from aretry.exceptions import RetryOperationTimeoutError
from aretry.operation import BaseOperation, RetryOperation, create_timeouts


async def noop(attempt_number: int) -> None:  # noqa: ARG001
    return None


async def run_until_exhausted(operation: RetryOperation, *errors: Exception) -> list[int]:
    """Drive ``operation`` with a callback failing with ``errors`` in turn."""
    seen: list[int] = []
    done = asyncio.Event()
    pending = list(errors)

    async def callback(attempt_number: int) -> None:
        seen.append(attempt_number)
        if not pending or not operation.retry(pending.pop(0)):
            done.set()

    operation.attempt(callback)
    await asyncio.wait_for(done.wait(), timeout=5)
    return seen


#####################################
#     Tests for create_timeouts     #
#####################################


def test_create_timeouts_exponential() -> None:
    """Test the delays of the default exponential formula."""
    assert create_timeouts(4, ExponentialBackoff(base_delay=1.0)) == [1.0, 2.0, 4.0, 8.0]


def test_create_timeouts_max_delay() -> None:
    """Test that the strategy cap applies to every delay."""
    assert create_timeouts(4, ExponentialBackoff(base_delay=1.0, max_delay=3.0)) == [
        1.0,
        2.0,
        3.0,
        3.0,
    ]


def test_create_timeouts_no_retries() -> None:
    """Test that no delay is computed without retries."""
    assert create_timeouts(0, ExponentialBackoff()) == []


def test_create_timeouts_forever_without_retries() -> None:
    """Test that retrying forever always has one delay to repeat."""
    assert create_timeouts(0, LinearBackoff(base_delay=0.5), forever=True) == [0.5]


def test_create_timeouts_randomize() -> None:
    """Test that randomize multiplies each delay by a factor in [1, 2)."""
    with patch("aretry.operation.retry_operation.random.uniform", return_value=1.5) as uniform:
        timeouts = create_timeouts(3, ExponentialBackoff(base_delay=1.0))
        randomized = create_timeouts(3, ExponentialBackoff(base_delay=1.0), randomize=True)
    assert timeouts == [1.0, 2.0, 4.0]
    assert randomized == [1.5, 3.0, 6.0]
    assert uniform.call_args_list == [call(1, 2)] * 3


def test_create_timeouts_randomize_respects_max_delay() -> None:
    """Test that the cap is applied after randomization."""
    with patch("aretry.operation.retry_operation.random.uniform", return_value=1.5):
        timeouts = create_timeouts(
            3, ExponentialBackoff(base_delay=1.0, max_delay=2.0), randomize=True
        )
    assert timeouts == [1.5, 2.0, 2.0]


def test_create_timeouts_randomize_sorted() -> None:
    """Test that randomized delays never shrink."""
    with patch(
        "aretry.operation.retry_operation.random.uniform", side_effect=[1.9, 1.0, 1.0]
    ):
        timeouts = create_timeouts(3, ConstantBackoff(delay=1.0), randomize=True)
    assert timeouts == [1.0, 1.0, 1.9]


####################################
#     Tests for RetryOperation     #
####################################


def test_base_operation_is_abstract() -> None:
    """Test that BaseOperation cannot be instantiated."""
    with pytest.raises(TypeError):
        BaseOperation()


def test_retry_operation_from_options() -> None:
    """Test that the backoff policy of the options is forwarded."""
    operation = RetryOperation.from_options(
        RetryOptions(retries=3, min_timeout=0.5, factor=3.0, max_timeout=4.0)
    )
    assert operation.timeouts == [0.5, 1.5, 4.0]
    assert operation.attempts == 0


def test_retry_operation_from_options_default_policy() -> None:
    """Test the default policy: 10 retries, starting at 1 second."""
    operation = RetryOperation.from_options(RetryOptions())
    assert operation.timeouts == [2.0**i for i in range(10)]


def test_retry_operation_from_options_custom_strategy() -> None:
    """Test that a custom backoff strategy replaces the exponential formula."""
    operation = RetryOperation.from_options(
        RetryOptions(retries=2, backoff_strategy=ConstantBackoff(delay=0.2))
    )
    assert operation.timeouts == [0.2, 0.2]


def test_retry_operation_retry_before_attempt() -> None:
    """Test that retry() cannot be called before attempt()."""
    with pytest.raises(RuntimeError, match=r"retry\(\) called before attempt\(\)"):
        RetryOperation([1.0]).retry(OSError("boom"))


@pytest.mark.asyncio
async def test_retry_operation_first_attempt_without_delay(mock_asleep: Mock) -> None:
    """Test that the first attempt starts without waiting."""
    operation = RetryOperation([1.0])
    seen = await run_until_exhausted(operation)
    assert seen == [1]
    assert operation.attempts == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_retry_operation_schedules_retries(mock_asleep: Mock) -> None:
    """Test that each retry waits the next delay."""
    operation = RetryOperation([0.5, 1.0])
    errors = [OSError("first"), OSError("second"), OSError("third")]

    seen = await run_until_exhausted(operation, *errors)

    assert seen == [1, 2, 3]
    assert operation.attempts == 3
    assert operation.timeouts == []
    assert operation.errors() == errors
    assert mock_asleep.call_args_list == [call(0.5), call(1.0)]


@pytest.mark.asyncio
async def test_retry_operation_no_retries(mock_asleep: Mock) -> None:
    """Test that an operation without delays never retries."""
    operation = RetryOperation([])
    error = OSError("boom")

    seen = await run_until_exhausted(operation, error)

    assert seen == [1]
    assert operation.get_main_error() is error
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_retry_operation_forever(mock_asleep: Mock) -> None:
    """Test that a forever operation reuses its last delay."""
    operation = RetryOperation([0.1, 0.2], forever=True)
    errors = [OSError(f"failure {i}") for i in range(5)]

    retried: list[bool] = []
    done = asyncio.Event()

    async def callback(attempt_number: int) -> None:
        if attempt_number > len(errors):
            done.set()
            return
        retried.append(operation.retry(errors[attempt_number - 1]))

    operation.attempt(callback)
    await asyncio.wait_for(done.wait(), timeout=5)

    assert retried == [True] * 5

    assert mock_asleep.call_args_list == [call(0.1), call(0.2), call(0.2), call(0.2), call(0.2)]
    # Only the latest error is kept once the delays are exhausted.
    assert operation.errors() == [errors[-1]]


@pytest.mark.asyncio
async def test_retry_operation_max_retry_time() -> None:
    """Test that the time budget stops the retries."""
    error = OSError("slow")
    with patch("aretry.operation.retry_operation.time") as mock_time:
        mock_time.monotonic.side_effect = [100.0, 105.0]
        operation = RetryOperation([0.1, 0.2], max_retry_time=5.0)
        operation.attempt(noop)
        assert not operation.retry(error)

    main_error = operation.get_main_error()
    assert isinstance(main_error, RetryOperationTimeoutError)
    assert str(main_error) == "RetryOperation timeout occurred"
    assert main_error.__cause__ is error
    assert operation.errors() == [error]
    assert operation.timeouts == [0.1, 0.2]


@pytest.mark.asyncio
async def test_retry_operation_within_max_retry_time(mock_asleep: Mock) -> None:
    """Test that retries continue while the time budget is not spent."""
    with patch("aretry.operation.retry_operation.time") as mock_time:
        mock_time.monotonic.side_effect = [100.0, 101.0]
        operation = RetryOperation([0.1], max_retry_time=5.0)
        operation.attempt(noop)
        assert operation.retry(OSError("fast"))
    operation.stop()
    assert operation.get_main_error() is not None


@pytest.mark.asyncio
async def test_retry_operation_main_error_most_frequent() -> None:
    """Test that the main error is the most frequent message."""
    operation = RetryOperation([])
    operation.attempt(noop)
    timeout = TimeoutError("timed out")
    errors = [timeout, ConnectionError("reset"), TimeoutError("timed out"), OSError("other")]
    for error in errors:
        operation.retry(error)

    main_error = operation.get_main_error()
    assert isinstance(main_error, TimeoutError)
    # Among errors with the same message, the most recent one is returned.
    assert main_error is errors[2]


@pytest.mark.asyncio
async def test_retry_operation_main_error_tie_latest() -> None:
    """Test that the most recent error wins a tie."""
    operation = RetryOperation([])
    operation.attempt(noop)
    first, second = OSError("first"), OSError("second")
    operation.retry(first)
    operation.retry(second)
    assert operation.get_main_error() is second


def test_retry_operation_main_error_none() -> None:
    """Test that there is no main error before any failure."""
    assert RetryOperation([1.0]).get_main_error() is None


@pytest.mark.asyncio
async def test_retry_operation_stop_cancels_pending_attempt() -> None:
    """Test that stop() cancels the scheduled attempt."""
    operation = RetryOperation([60.0])
    seen: list[int] = []

    async def callback(attempt_number: int) -> None:
        seen.append(attempt_number)
        operation.retry(OSError("boom"))

    operation.attempt(callback)
    while not seen:
        await asyncio.sleep(0)
    operation.stop()
    await asyncio.sleep(0.01)

    assert seen == [1]
    assert operation.attempts == 1


def test_retry_operation_stop_without_attempt() -> None:
    """Test that stop() is a no-op before the first attempt."""
    RetryOperation([1.0]).stop()


@pytest.mark.asyncio
async def test_retry_operation_reset(mock_asleep: Mock) -> None:
    """Test that reset() restores the initial schedule."""
    operation = RetryOperation([0.5, 1.0])
    await run_until_exhausted(operation, OSError("a"), OSError("b"))
    assert operation.attempts == 3

    operation.reset()

    assert operation.attempts == 0
    assert operation.timeouts == [0.5, 1.0]
    assert operation.errors() == []
    assert operation.get_main_error() is None
