r"""Retry decision logic for failed attempts.

This module provides the RetryDecider class, the single place where the
retry loop evaluates the retryability predicate on an exception.
"""

from __future__ import annotations

__all__ = ["RetryDecider"]

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class RetryDecider:
    """Decides whether a failed attempt should be retried.

    Args:
        retry_if: Predicate returning ``True`` when the exception is
            retryable.
    """

    def __init__(self, retry_if: Callable[[Exception], bool]) -> None:
        self.retry_if = retry_if

    def should_retry(self, error: Exception, attempt: int) -> tuple[bool, str]:
        """Determine if a failed attempt is retryable.

        The predicate is evaluated exactly once per call, including on the
        last permitted attempt, so a non-retryable error is reported as
        such rather than as an exhaustion.

        Args:
            error: The exception raised by the operation.
            attempt: Current attempt number (0-indexed).

        Returns:
            Tuple of (should_retry, reason).
        """
        if not self.retry_if(error):
            logger.debug(
                f"Attempt {attempt + 1} failed with non-retryable {type(error).__name__}: {error}"
            )
            return (False, "retry_if returned False")
        return (True, type(error).__name__)
