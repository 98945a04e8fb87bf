r"""Synchronous entry points of the retry loop.

This module provides ``retry`` for plain blocking retries and
``retry_with_token`` for retries that can be interrupted by a
``CancellationToken``.
"""

from __future__ import annotations

__all__ = ["build_config", "retry", "retry_with_token"]

from typing import TYPE_CHECKING, Any, TypeVar

from aretry.config import RetryConfig
from aretry.core import RetryExecutor

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.cancellation import CancellationToken

T = TypeVar("T")


def build_config(config: RetryConfig | None, **options: Any) -> RetryConfig:
    r"""Merge keyword options onto a configuration.

    Args:
        config: Base configuration. Defaults to ``RetryConfig()``.
        **options: ``RetryConfig`` fields to override. ``None`` values and
            ``max_attempts`` values <= 0 are ignored.

    Returns:
        The configuration to use.

    Example:
        ```pycon
        >>> from aretry.call import build_config
        >>> build_config(None, max_attempts=5).max_attempts
        5

        ```
    """
    if config is None:
        config = RetryConfig()
    if not options:
        return config
    return config.merge(**options)


def retry(
    operation: Callable[[], T],
    config: RetryConfig | None = None,
    **options: Any,
) -> T:
    r"""Run an operation with automatic retry logic.

    The operation is invoked at most ``max_attempts`` times. Between two
    attempts the calling thread sleeps for the backoff delay.

    Args:
        operation: Function without arguments to run.
        config: Optional retry configuration. Defaults to
            ``RetryConfig()``.
        **options: ``RetryConfig`` fields overriding ``config``
            (``max_attempts``, ``backoff``, ``retry_if``, ``on_retry``).

    Returns:
        The value returned by the first successful attempt.

    Raises:
        MaxAttemptsReachedError: If every permitted attempt failed with a
            retryable exception. The last exception is available as
            ``last_error``.
        Exception: The operation's own exception when ``retry_if``
            classifies it as non-retryable.

    Example:
        ```pycon
        >>> from aretry import retry
        >>> from aretry.backoff import ConstantBackoff
        >>> calls = []
        >>> def flaky() -> str:
        ...     calls.append(1)
        ...     if len(calls) < 2:
        ...         raise ConnectionError("reset")
        ...     return "ok"
        ...
        >>> retry(flaky, backoff=ConstantBackoff(0.0))
        'ok'
        >>> len(calls)
        2

        ```
    """
    return RetryExecutor(build_config(config, **options)).execute(operation)


def retry_with_token(
    token: CancellationToken,
    operation: Callable[[CancellationToken], T],
    config: RetryConfig | None = None,
    **options: Any,
) -> T:
    r"""Run an operation with retries that can be cancelled.

    The token is checked before every attempt and races against every
    backoff wait. The operation receives the token so it can cooperate
    with the cancellation.

    Args:
        token: Cancellation token, possibly carrying a deadline.
        operation: Function called with ``token`` on every attempt.
        config: Optional retry configuration. Defaults to
            ``RetryConfig()``.
        **options: ``RetryConfig`` fields overriding ``config``.

    Returns:
        The value returned by the first successful attempt.

    Raises:
        MaxAttemptsReachedError: If every permitted attempt failed with a
            retryable exception.
        RetryCancelledError: If the token was cancelled.
        RetryDeadlineExceededError: If the token's deadline passed.
        BaseException: A custom cause passed to ``token.cancel``.
        Exception: The operation's own exception when ``retry_if``
            classifies it as non-retryable.

    Example:
        ```pycon
        >>> from aretry import CancellationToken, retry_with_token
        >>> token = CancellationToken(timeout=30.0)
        >>> retry_with_token(token, lambda token: token.is_cancelled)
        False

        ```
    """
    return RetryExecutor(build_config(config, **options)).execute_with_token(token, operation)
