r"""aretry - Policy-driven retry loops with cancellation support.

This package wraps fallible operations (network calls, I/O) with a retry
loop that decides, after each failure, whether to retry, how long to wait
before retrying, and when to give up, while honoring an external
cancellation token or deadline.

Key Features:
    - Synchronous, cancellable and asyncio retry loops
    - Backoff strategies: Constant, Exponential, Exponential with jitter,
      Linear, Fibonacci, or any ``attempt -> seconds`` function
    - Custom retryability predicates, with ready-made HTTP predicates
    - Interruptible backoff waits driven by a ``CancellationToken``
    - Aggregated errors keeping both the terminal reason and the last
      operation error

Example:
    ```pycon
    >>> from aretry import CancellationToken, retry, retry_with_token
    >>> from aretry.backoff import ExponentialBackoff
    >>> retry(lambda: "ok", max_attempts=5, backoff=ExponentialBackoff(base_delay=0.1))
    'ok'
    >>> token = CancellationToken(timeout=10.0)
    >>> retry_with_token(token, lambda token: "ok")
    'ok'

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "CancellationToken",
    "HttpError",
    "MaxAttemptsReachedError",
    "RetryCancelledError",
    "RetryConfig",
    "RetryDeadlineExceededError",
    "RetryError",
    "RetryInfo",
    "RetryOutcome",
    "TokenCancelledError",
    "TokenDeadlineExceededError",
    "__version__",
    "retry",
    "retry_async",
    "retry_with_token",
    "retryable",
]

from importlib.metadata import PackageNotFoundError, version

from aretry.call import retry, retry_with_token
from aretry.call_async import retry_async
from aretry.callbacks import RetryInfo
from aretry.cancellation import (
    CancellationToken,
    TokenCancelledError,
    TokenDeadlineExceededError,
)
from aretry.config import DEFAULT_MAX_ATTEMPTS, RetryConfig
from aretry.decorator import retryable
from aretry.exceptions import (
    MaxAttemptsReachedError,
    RetryCancelledError,
    RetryDeadlineExceededError,
    RetryError,
    RetryOutcome,
)
from aretry.http import HttpError

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
