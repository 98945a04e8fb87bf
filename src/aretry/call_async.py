r"""Asynchronous entry point of the retry loop."""

from __future__ import annotations

__all__ = ["retry_async"]

from typing import TYPE_CHECKING, Any, TypeVar

from aretry.call import build_config
from aretry.core import AsyncRetryExecutor

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.cancellation import CancellationToken
    from aretry.config import RetryConfig

T = TypeVar("T")


async def retry_async(
    operation: Callable[..., Awaitable[T]],
    config: RetryConfig | None = None,
    *,
    token: CancellationToken | None = None,
    **options: Any,
) -> T:
    r"""Await a coroutine operation with automatic retry logic.

    This is the asynchronous counterpart of ``retry`` and
    ``retry_with_token``: without ``token`` the operation is called
    without arguments, with ``token`` it receives the token and the
    backoff waits are interrupted as soon as the token fires.

    Args:
        operation: Coroutine function to run.
        config: Optional retry configuration. Defaults to
            ``RetryConfig()``.
        token: Optional cancellation token.
        **options: ``RetryConfig`` fields overriding ``config``.

    Returns:
        The value returned by the first successful attempt.

    Raises:
        MaxAttemptsReachedError: If every permitted attempt failed with a
            retryable exception.
        RetryCancelledError: If the token was cancelled.
        RetryDeadlineExceededError: If the token's deadline passed.
        Exception: The operation's own exception when ``retry_if``
            classifies it as non-retryable.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretry import retry_async
        >>> async def answer() -> int:
        ...     return 42
        ...
        >>> asyncio.run(retry_async(answer))
        42

        ```
    """
    executor = AsyncRetryExecutor(build_config(config, **options))
    if token is None:
        return await executor.execute(operation)
    return await executor.execute_with_token(token, operation)
