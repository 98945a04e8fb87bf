r"""Asynchronous retry executor.

This module provides the AsyncRetryExecutor class that runs coroutine
operations with automatic retry logic. Backoff waits use
``asyncio.sleep``, letting other tasks run in the meantime, and can be
interrupted by a ``CancellationToken``.
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "wait_for_token"]

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from aretry.core.decider import RetryDecider
from aretry.core.executor_core import next_delay, token_failure
from aretry.exceptions import RetryOutcome, aggregate_failure

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.cancellation import CancellationToken
    from aretry.config import RetryConfig

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


async def wait_for_token(token: CancellationToken, delay: float) -> bool:
    """Wait ``delay`` seconds or until ``token`` fires.

    The token notifies the event loop through ``call_soon_threadsafe``, so
    it can be cancelled from any thread.

    Args:
        token: The cancellation token to watch.
        delay: Maximum number of seconds to wait.

    Returns:
        ``True`` if the token is cancelled, ``False`` if the delay elapsed
        first.
    """
    loop = asyncio.get_running_loop()
    cancelled = asyncio.Event()

    def notify() -> None:
        if not loop.is_closed():
            loop.call_soon_threadsafe(cancelled.set)

    unregister = token.add_callback(notify)
    try:
        remaining = token.remaining()
        timeout = delay if remaining is None else min(delay, max(remaining, 0.0))
        try:
            await asyncio.wait_for(cancelled.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            pass
    finally:
        unregister()
    return token.is_cancelled


class AsyncRetryExecutor:
    """Executes coroutine operations with automatic retry logic.

    This is the asynchronous counterpart of ``RetryExecutor`` and follows
    the same algorithm. Task cancellation (``asyncio.CancelledError``) is
    never caught and propagates to the caller.

    Args:
        config: Retry configuration.

    Attributes:
        config: Retry configuration.
        decider: Logic for deciding whether to retry.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry.config import RetryConfig
        >>> from aretry.core import AsyncRetryExecutor
        >>> async def fetch() -> int:
        ...     return 1
        ...
        >>> asyncio.run(AsyncRetryExecutor(RetryConfig()).execute(fetch))
        1

        ```
    """

    def __init__(self, config: RetryConfig) -> None:
        self.config = config
        self.decider: RetryDecider = RetryDecider(config.retry_if)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self.config})"

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Await ``operation`` until it succeeds or the retry policy gives up.

        Args:
            operation: Coroutine function without arguments.

        Returns:
            The value returned by the first successful attempt.

        Raises:
            MaxAttemptsReachedError: If every permitted attempt failed with
                a retryable exception.
            Exception: The operation's own exception when the predicate
                classifies it as non-retryable.
        """
        max_attempts = self.config.max_attempts
        last_error: Exception | None = None

        for attempt in range(max_attempts):
            try:
                return await operation()
            except Exception as exc:
                last_error = exc
                should_retry, reason = self.decider.should_retry(exc, attempt)
                if not should_retry:
                    raise

            if attempt + 1 < max_attempts:
                await asyncio.sleep(next_delay(self.config, attempt, last_error, reason))

        logger.debug(f"All {max_attempts} attempts failed")
        raise aggregate_failure(RetryOutcome.EXHAUSTED, last_error) from last_error

    async def execute_with_token(
        self,
        token: CancellationToken,
        operation: Callable[[CancellationToken], Awaitable[T]],
    ) -> T:
        """Await ``operation`` with retries, stopping when ``token`` fires.

        Args:
            token: Cancellation token, possibly carrying a deadline.
            operation: Coroutine function called with ``token`` on every
                attempt.

        Returns:
            The value returned by the first successful attempt.

        Raises:
            MaxAttemptsReachedError: If every permitted attempt failed with
                a retryable exception.
            RetryCancelledError: If the token was cancelled.
            RetryDeadlineExceededError: If the token's deadline passed.
            BaseException: The token's custom cause, raised verbatim.
            Exception: The operation's own exception when the predicate
                classifies it as non-retryable.
        """
        max_attempts = self.config.max_attempts
        last_error: Exception | None = None

        for attempt in range(max_attempts):
            if token.is_cancelled:
                raise token_failure(token, last_error)
            try:
                return await operation(token)
            except Exception as exc:
                last_error = exc
                should_retry, reason = self.decider.should_retry(exc, attempt)
                if not should_retry:
                    raise

            if attempt + 1 < max_attempts:
                delay = next_delay(self.config, attempt, last_error, reason)
                if await wait_for_token(token, delay):
                    raise token_failure(token, last_error)

        logger.debug(f"All {max_attempts} attempts failed")
        raise aggregate_failure(RetryOutcome.EXHAUSTED, last_error) from last_error
