r"""Retry observer payload and invocation.

The retry loop notifies an optional ``on_retry`` observer after every
retryable failure that will be followed by another attempt. The observer
is a notification hook only (logging, metrics): it cannot change the
course of the loop, and an exception raised by the observer is logged and
ignored.

Example:
    ```pycon
    >>> from aretry import retry
    >>> from aretry.callbacks import RetryInfo
    >>> def log_retry(info: RetryInfo) -> None:
    ...     print(f"Attempt {info.attempt}/{info.max_attempts} failed: {info.error}")
    ...
    >>> result = retry(lambda: 42, on_retry=log_retry)
    >>> result
    42

    ```
"""

from __future__ import annotations

__all__ = ["RetryInfo", "invoke_on_retry"]

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryInfo:
    """Information passed to the on_retry callback.

    Attributes:
        attempt: The number of the attempt that just failed (1-indexed).
            The first notification carries ``attempt=1``.
        max_attempts: Maximum number of attempts configured.
        error: The exception that triggered the retry.
        wait_time: The delay in seconds before the next attempt.
    """

    attempt: int
    max_attempts: int
    error: Exception
    wait_time: float


def invoke_on_retry(
    on_retry: Callable[[RetryInfo], None] | None,
    *,
    attempt: int,
    max_attempts: int,
    error: Exception,
    wait_time: float,
) -> None:
    """Invoke on_retry callback if provided.

    Args:
        on_retry: Optional callback to invoke before each wait.
        attempt: The attempt number that failed (0-indexed internally). The
            callback receives this as a 1-indexed value (attempt + 1).
        max_attempts: Maximum number of attempts.
        error: The exception that triggered the retry.
        wait_time: The delay in seconds before the next attempt.
    """
    if on_retry is None:
        return
    info = RetryInfo(
        attempt=attempt + 1,
        max_attempts=max_attempts,
        error=error,
        wait_time=wait_time,
    )
    try:
        on_retry(info)
    except Exception:
        logger.exception(f"on_retry callback failed for attempt {info.attempt}")
