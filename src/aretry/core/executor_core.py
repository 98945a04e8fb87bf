r"""Shared core logic for retry executors.

This module provides helper functions used by both the synchronous and
asynchronous retry executors: delay computation with observer
notification, and translation of a triggered cancellation token into the
error raised to the caller.
"""

from __future__ import annotations

__all__ = ["next_delay", "token_failure"]

import logging
from typing import TYPE_CHECKING

from aretry.callbacks import invoke_on_retry
from aretry.cancellation import TokenCancelledError, TokenDeadlineExceededError
from aretry.exceptions import RetryOutcome, aggregate_failure

if TYPE_CHECKING:
    from aretry.cancellation import CancellationToken
    from aretry.config import RetryConfig

logger: logging.Logger = logging.getLogger(__name__)


def next_delay(config: RetryConfig, attempt: int, error: Exception, reason: str) -> float:
    """Compute the wait before the next attempt and notify the observer.

    Args:
        config: Retry configuration providing the backoff and observer.
        attempt: The attempt number that just failed (0-indexed).
        error: The exception raised by the failed attempt.
        reason: Short description of why the attempt is retried.

    Returns:
        The delay in seconds. Negative values returned by a custom backoff
        function are raised to zero.
    """
    delay = config.backoff(attempt)
    if delay < 0:
        logger.debug(f"Backoff returned a negative delay ({delay}), using 0 instead")
        delay = 0.0
    logger.debug(
        f"Attempt {attempt + 1}/{config.max_attempts} failed ({reason}), "
        f"waiting {delay:.2f}s before retry"
    )
    invoke_on_retry(
        config.on_retry,
        attempt=attempt,
        max_attempts=config.max_attempts,
        error=error,
        wait_time=delay,
    )
    return delay


def token_failure(token: CancellationToken, last_error: Exception | None) -> BaseException:
    """Build the error raised when the token stops the retry loop.

    Args:
        token: The triggered cancellation token.
        last_error: The last exception raised by the operation, if any.

    Returns:
        A ``RetryDeadlineExceededError`` or ``RetryCancelledError``
        wrapping ``last_error`` for the two standard causes, or the
        token's custom cause unchanged.

    Example:
        ```pycon
        >>> from aretry.cancellation import CancellationToken
        >>> from aretry.core.executor_core import token_failure
        >>> token = CancellationToken()
        >>> token.cancel()
        >>> token_failure(token, None)
        RetryCancelledError('retry cancelled')

        ```
    """
    cause = token.cause
    if isinstance(cause, TokenDeadlineExceededError):
        outcome = RetryOutcome.DEADLINE_EXCEEDED
    elif isinstance(cause, TokenCancelledError) or cause is None:
        outcome = RetryOutcome.CANCELLED
    else:
        logger.debug(f"Retry stopped by custom cancellation cause {cause!r}")
        return cause
    logger.debug(f"Retry stopped: {outcome.value}")
    return aggregate_failure(outcome, last_error)
