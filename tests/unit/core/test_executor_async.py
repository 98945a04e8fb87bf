r"""Unit tests for asynchronous retry executor."""

from __future__ import annotations

import asyncio
import threading
import time
from unittest.mock import AsyncMock, Mock, call

import pytest

from aretry.backoff import ConstantBackoff, LinearBackoff
from aretry.cancellation import CancellationToken
from aretry.config import RetryConfig
from aretry.core import AsyncRetryExecutor
from aretry.core.executor_async import wait_for_token
from aretry.exceptions import (
    MaxAttemptsReachedError,
    RetryCancelledError,
    RetryDeadlineExceededError,
)


def only_connection_errors(error: Exception) -> bool:
    return isinstance(error, ConnectionError)


def test_async_retry_executor_creation() -> None:
    config = RetryConfig()
    executor = AsyncRetryExecutor(config)

    assert executor.config is config
    assert executor.decider is not None


@pytest.mark.asyncio
async def test_async_retry_executor_successful_operation(mock_asleep: Mock) -> None:
    operation = AsyncMock(return_value="result")

    assert await AsyncRetryExecutor(RetryConfig()).execute(operation) == "result"
    operation.assert_awaited_once_with()
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_retry_executor_exhausted(mock_asleep: Mock, mock_callback: Mock) -> None:
    errors = [ConnectionError("1"), ConnectionError("2"), ConnectionError("3")]
    operation = AsyncMock(side_effect=errors)
    config = RetryConfig(backoff=LinearBackoff(base_delay=1.0), on_retry=mock_callback)

    with pytest.raises(MaxAttemptsReachedError) as exc_info:
        await AsyncRetryExecutor(config).execute(operation)

    assert operation.await_count == 3
    assert mock_callback.call_count == 2
    assert mock_asleep.call_args_list == [call(1.0), call(2.0)]
    assert exc_info.value.last_error is errors[2]


@pytest.mark.asyncio
async def test_async_retry_executor_non_retryable(mock_asleep: Mock) -> None:
    error = ValueError("bad")
    operation = AsyncMock(side_effect=error)
    config = RetryConfig(max_attempts=5, retry_if=only_connection_errors)

    with pytest.raises(ValueError, match=r"bad") as exc_info:
        await AsyncRetryExecutor(config).execute(operation)

    assert exc_info.value is error
    operation.assert_awaited_once()
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_retry_executor_success_after_failure(mock_asleep: Mock) -> None:
    operation = AsyncMock(side_effect=[ConnectionError(), "ok"])

    assert await AsyncRetryExecutor(RetryConfig()).execute(operation) == "ok"
    mock_asleep.assert_called_once_with(1.0)


@pytest.mark.asyncio
async def test_async_execute_with_token_success() -> None:
    token = CancellationToken()
    operation = AsyncMock(return_value=7)

    assert await AsyncRetryExecutor(RetryConfig()).execute_with_token(token, operation) == 7
    operation.assert_awaited_once_with(token)


@pytest.mark.asyncio
async def test_async_execute_with_token_already_cancelled() -> None:
    token = CancellationToken()
    token.cancel()
    operation = AsyncMock()

    with pytest.raises(RetryCancelledError):
        await AsyncRetryExecutor(RetryConfig()).execute_with_token(token, operation)

    operation.assert_not_awaited()


@pytest.mark.asyncio
async def test_async_execute_with_token_deadline_interrupts_wait() -> None:
    token = CancellationToken(timeout=0.05)
    operation = AsyncMock(side_effect=ConnectionError("down"))
    config = RetryConfig(max_attempts=5, backoff=ConstantBackoff(delay=30.0))

    start = time.monotonic()
    with pytest.raises(RetryDeadlineExceededError):
        await AsyncRetryExecutor(config).execute_with_token(token, operation)

    assert time.monotonic() - start < 10.0
    operation.assert_awaited_once_with(token)


@pytest.mark.asyncio
async def test_async_execute_with_token_cancel_from_thread() -> None:
    token = CancellationToken()
    operation = AsyncMock(side_effect=ConnectionError("down"))
    config = RetryConfig(max_attempts=5, backoff=ConstantBackoff(delay=30.0))
    timer = threading.Timer(0.05, token.cancel)
    timer.start()
    try:
        start = time.monotonic()
        with pytest.raises(RetryCancelledError):
            await AsyncRetryExecutor(config).execute_with_token(token, operation)
        assert time.monotonic() - start < 10.0
    finally:
        timer.cancel()

    operation.assert_awaited_once()


@pytest.mark.asyncio
async def test_async_execute_with_token_exhausted() -> None:
    operation = AsyncMock(side_effect=ConnectionError("down"))
    config = RetryConfig(max_attempts=2, backoff=ConstantBackoff(delay=0.0))

    with pytest.raises(MaxAttemptsReachedError):
        await AsyncRetryExecutor(config).execute_with_token(CancellationToken(), operation)

    assert operation.await_count == 2


@pytest.mark.asyncio
async def test_async_execute_with_token_custom_cause_raised_verbatim() -> None:
    token = CancellationToken()
    cause = RuntimeError("service stopping")
    token.cancel(cause)
    operation = AsyncMock()

    with pytest.raises(RuntimeError, match=r"service stopping") as exc_info:
        await AsyncRetryExecutor(RetryConfig()).execute_with_token(token, operation)

    assert exc_info.value is cause
    operation.assert_not_awaited()


@pytest.mark.asyncio
async def test_async_execute_with_token_non_retryable(mock_callback: Mock) -> None:
    error = ValueError("bad")
    operation = AsyncMock(side_effect=error)
    config = RetryConfig(retry_if=only_connection_errors, on_retry=mock_callback)

    with pytest.raises(ValueError, match=r"bad") as exc_info:
        await AsyncRetryExecutor(config).execute_with_token(CancellationToken(), operation)

    assert exc_info.value is error
    operation.assert_awaited_once()
    mock_callback.assert_not_called()


@pytest.mark.asyncio
async def test_async_execute_with_token_observer_called_between_attempts(
    mock_callback: Mock,
) -> None:
    errors = [ConnectionError("1"), ConnectionError("2"), ConnectionError("3")]
    operation = AsyncMock(side_effect=errors)
    config = RetryConfig(backoff=ConstantBackoff(delay=0.0), on_retry=mock_callback)

    with pytest.raises(MaxAttemptsReachedError) as exc_info:
        await AsyncRetryExecutor(config).execute_with_token(CancellationToken(), operation)

    assert operation.await_count == 3
    assert mock_callback.call_count == 2
    assert [c.args[0].attempt for c in mock_callback.call_args_list] == [1, 2]
    assert [c.args[0].error for c in mock_callback.call_args_list] == errors[:2]
    assert exc_info.value.last_error is errors[2]


@pytest.mark.asyncio
async def test_async_execute_with_token_operation_cancels(mock_callback: Mock) -> None:
    token = CancellationToken()

    async def operation(token: CancellationToken) -> None:
        token.cancel()
        msg = "cancelled while working"
        raise ConnectionError(msg)

    config = RetryConfig(backoff=ConstantBackoff(delay=30.0), on_retry=mock_callback)
    with pytest.raises(RetryCancelledError, match=r"cancelled while working"):
        await AsyncRetryExecutor(config).execute_with_token(token, operation)

    mock_callback.assert_called_once()


@pytest.mark.asyncio
async def test_async_retry_executor_task_cancellation_propagates() -> None:
    operation = AsyncMock(side_effect=ConnectionError("down"))
    config = RetryConfig(max_attempts=5, backoff=ConstantBackoff(delay=30.0))
    task = asyncio.create_task(AsyncRetryExecutor(config).execute(operation))
    await asyncio.sleep(0.01)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_wait_for_token_delay_elapses() -> None:
    assert not await wait_for_token(CancellationToken(), 0.01)


@pytest.mark.asyncio
async def test_wait_for_token_cancelled_in_loop() -> None:
    token = CancellationToken()
    asyncio.get_running_loop().call_later(0.01, token.cancel)

    assert await wait_for_token(token, 30.0)
