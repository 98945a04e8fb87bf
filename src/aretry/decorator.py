r"""Decorator applying the retry loop to every call of a function."""

from __future__ import annotations

__all__ = ["retryable"]

import functools
import inspect
from typing import TYPE_CHECKING, Any

from aretry.call import build_config, retry
from aretry.call_async import retry_async

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.config import RetryConfig


def retryable(config: RetryConfig | None = None, **options: Any) -> Callable:
    r"""Return a decorator running the decorated function through ``retry``.

    Coroutine functions are wrapped with ``retry_async``. The arguments of
    each call are bound to the function and reused by every attempt.

    Args:
        config: Optional retry configuration. Defaults to
            ``RetryConfig()``.
        **options: ``RetryConfig`` fields overriding ``config``.

    Returns:
        The decorator.

    Example:
        ```pycon
        >>> from aretry import retryable
        >>> from aretry.backoff import ConstantBackoff
        >>> @retryable(max_attempts=5, backoff=ConstantBackoff(0.0))
        ... def add(a: int, b: int) -> int:
        ...     return a + b
        ...
        >>> add(1, 2)
        3

        ```
    """
    resolved = build_config(config, **options)

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await retry_async(functools.partial(func, *args, **kwargs), resolved)

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return retry(functools.partial(func, *args, **kwargs), resolved)

        return wrapper

    return decorator
