r"""Terminal outcomes and aggregated errors of a retry loop.

A retry loop ends in exactly one outcome. Success returns the operation's
value and a non-retryable failure re-raises the operation's own exception
untouched. The three remaining outcomes (attempts exhausted, cancelled,
deadline exceeded) raise a ``RetryError`` subclass that carries both the
terminal kind and the last error raised by the operation.

Example:
    ```pycon
    >>> from aretry.exceptions import MaxAttemptsReachedError, RetryOutcome, aggregate_failure
    >>> error = aggregate_failure(RetryOutcome.EXHAUSTED, ValueError("boom"))
    >>> isinstance(error, MaxAttemptsReachedError)
    True
    >>> str(error)
    'maximum retry attempts reached: boom'
    >>> error.unwrap()
    ValueError('boom')

    ```
"""

from __future__ import annotations

__all__ = [
    "MaxAttemptsReachedError",
    "RetryCancelledError",
    "RetryDeadlineExceededError",
    "RetryError",
    "RetryOutcome",
    "aggregate_failure",
]

from enum import Enum


class RetryOutcome(Enum):
    """Terminal outcomes of a retry loop.

    Attributes:
        SUCCESS: The operation succeeded.
        NON_RETRYABLE: The operation failed and the predicate refused a retry.
        EXHAUSTED: Every permitted attempt failed with a retryable error.
        CANCELLED: The cancellation token was cancelled explicitly.
        DEADLINE_EXCEEDED: The cancellation token reached its deadline.
    """

    SUCCESS = "success"
    NON_RETRYABLE = "non_retryable"
    EXHAUSTED = "exhausted"
    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class RetryError(Exception):
    """Base class of the aggregated retry errors.

    The instance keeps the last operation error in ``last_error`` and is
    raised ``from`` it, so the original exception is also available as
    ``__cause__``.

    Args:
        last_error: The last exception raised by the operation, or ``None``
            if no attempt completed.

    Attributes:
        outcome: The terminal outcome represented by this error.
        last_error: The last exception raised by the operation, if any.
    """

    outcome: RetryOutcome
    sentinel: str = "retry failed"

    def __init__(self, last_error: Exception | None = None) -> None:
        self.last_error = last_error
        message = self.sentinel if last_error is None else f"{self.sentinel}: {last_error}"
        super().__init__(message)

    def unwrap(self) -> Exception | None:
        """Return the last operation error wrapped by this error."""
        return self.last_error


class MaxAttemptsReachedError(RetryError):
    """Raised when every permitted attempt failed with a retryable error."""

    outcome = RetryOutcome.EXHAUSTED
    sentinel = "maximum retry attempts reached"


class RetryCancelledError(RetryError):
    """Raised when the cancellation token is cancelled before or between
    attempts."""

    outcome = RetryOutcome.CANCELLED
    sentinel = "retry cancelled"


class RetryDeadlineExceededError(RetryError):
    """Raised when the cancellation token reaches its deadline before or
    between attempts."""

    outcome = RetryOutcome.DEADLINE_EXCEEDED
    sentinel = "retry deadline exceeded"


_ERROR_BY_OUTCOME: dict[RetryOutcome, type[RetryError]] = {
    RetryOutcome.EXHAUSTED: MaxAttemptsReachedError,
    RetryOutcome.CANCELLED: RetryCancelledError,
    RetryOutcome.DEADLINE_EXCEEDED: RetryDeadlineExceededError,
}


def aggregate_failure(outcome: RetryOutcome, last_error: Exception | None) -> RetryError:
    """Combine a terminal outcome with the last operation error.

    Args:
        outcome: One of ``EXHAUSTED``, ``CANCELLED`` or
            ``DEADLINE_EXCEEDED``.
        last_error: The last exception raised by the operation, if any.

    Returns:
        The aggregated error, with ``__cause__`` set to ``last_error``.

    Raises:
        ValueError: If ``outcome`` is not an aggregated outcome.
    """
    error_cls = _ERROR_BY_OUTCOME.get(outcome)
    if error_cls is None:
        msg = f"outcome {outcome} is not aggregated"
        raise ValueError(msg)
    error = error_cls(last_error)
    error.__cause__ = last_error
    return error
