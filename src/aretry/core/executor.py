r"""Synchronous retry executor.

This module provides the RetryExecutor class that runs an operation with
automatic retry logic, in a plain blocking variant and in a cancellable
variant driven by a ``CancellationToken``.
"""

from __future__ import annotations

__all__ = ["RetryExecutor"]

import logging
import time
from typing import TYPE_CHECKING, TypeVar

from aretry.core.decider import RetryDecider
from aretry.core.executor_core import next_delay, token_failure
from aretry.exceptions import RetryOutcome, aggregate_failure

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.cancellation import CancellationToken
    from aretry.config import RetryConfig

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RetryExecutor:
    """Executes operations with automatic retry logic.

    The executor drives the try/classify/wait cycle:

    - Success: the operation's return value is returned immediately.
    - Non-retryable exception: re-raised unchanged after a single
      evaluation of the predicate.
    - Retryable exception: the observer is notified and the executor
      waits for the backoff delay before the next attempt. No wait
      happens after the last permitted attempt.
    - Exhaustion: ``MaxAttemptsReachedError`` wrapping the last exception.

    The executor keeps no state between calls, so one instance can be
    shared by concurrent callers.

    Args:
        config: Retry configuration.

    Attributes:
        config: Retry configuration.
        decider: Logic for deciding whether to retry.

    Example:
        ```pycon
        >>> from aretry.backoff import ConstantBackoff
        >>> from aretry.config import RetryConfig
        >>> from aretry.core import RetryExecutor
        >>> executor = RetryExecutor(RetryConfig(backoff=ConstantBackoff(0.0)))
        >>> executor.execute(lambda: "done")
        'done'

        ```
    """

    def __init__(self, config: RetryConfig) -> None:
        self.config = config
        self.decider: RetryDecider = RetryDecider(config.retry_if)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(config={self.config})"

    def execute(self, operation: Callable[[], T]) -> T:
        """Run ``operation`` until it succeeds or the retry policy gives up.

        Args:
            operation: Function without arguments to run.

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
                return operation()
            except Exception as exc:
                last_error = exc
                should_retry, reason = self.decider.should_retry(exc, attempt)
                if not should_retry:
                    raise

            if attempt + 1 < max_attempts:
                time.sleep(next_delay(self.config, attempt, last_error, reason))

        logger.debug(f"All {max_attempts} attempts failed")
        raise aggregate_failure(RetryOutcome.EXHAUSTED, last_error) from last_error

    def execute_with_token(
        self,
        token: CancellationToken,
        operation: Callable[[CancellationToken], T],
    ) -> T:
        """Run ``operation`` with retries, stopping when ``token`` fires.

        The token is checked before every attempt: a token that is already
        triggered stops the loop without invoking the operation, even
        before the first attempt. The backoff wait returns as soon as the
        token fires. A running operation is never interrupted; it receives
        the token so it can cooperate.

        Args:
            token: Cancellation token, possibly carrying a deadline.
            operation: Function called with ``token`` on every attempt.

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
                return operation(token)
            except Exception as exc:
                last_error = exc
                should_retry, reason = self.decider.should_retry(exc, attempt)
                if not should_retry:
                    raise

            if attempt + 1 < max_attempts:
                delay = next_delay(self.config, attempt, last_error, reason)
                if token.wait(delay):
                    raise token_failure(token, last_error)

        logger.debug(f"All {max_attempts} attempts failed")
        raise aggregate_failure(RetryOutcome.EXHAUSTED, last_error) from last_error
