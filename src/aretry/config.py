r"""Configuration dataclass and defaults for retry loops.

This module provides the configuration constants and the immutable
``RetryConfig`` object consumed by the retry executors and the
``retry``/``retry_with_token``/``retry_async`` entry points.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_BACKOFF",
    "DEFAULT_MAX_ATTEMPTS",
    "RetryConfig",
    "default_retry_if",
]

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from aretry.backoff import ConstantBackoff

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.callbacks import RetryInfo

logger: logging.Logger = logging.getLogger(__name__)

# Default maximum number of attempts, including the first one
DEFAULT_MAX_ATTEMPTS = 3

# Default backoff: wait one second between two attempts
DEFAULT_BACKOFF = ConstantBackoff(delay=1.0)


def default_retry_if(error: Exception) -> bool:  # noqa: ARG001
    r"""Default retry predicate: every exception is retryable.

    Args:
        error: The exception raised by the operation.

    Returns:
        Always ``True``.
    """
    return True


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    The configuration is immutable: use ``merge`` to derive a new
    configuration. The backoff and predicate are plain functions without
    shared mutable state, so a configuration can be reused by any number of
    concurrent retry loops.

    Args:
        max_attempts: Maximum number of invocations of the operation,
            including the first one. Values <= 0 fall back to
            ``DEFAULT_MAX_ATTEMPTS``.
        backoff: Function mapping the 0-indexed attempt that just failed to
            the delay in seconds before the next attempt. Any
            ``BaseBackoffStrategy`` can be used.
        retry_if: Predicate deciding whether an exception is retryable.
            Defaults to retrying every exception.
        on_retry: Optional callback called with a ``RetryInfo`` before each
            wait.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> from aretry.config import RetryConfig
        >>> config = RetryConfig()
        >>> config.max_attempts
        3
        >>> config = RetryConfig(max_attempts=0)
        >>> config.max_attempts
        3
        >>> merged = config.merge(max_attempts=5, backoff=ExponentialBackoff())
        >>> merged.max_attempts
        5
        >>> config.max_attempts
        3

        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff: Callable[[int], float] = field(default=DEFAULT_BACKOFF)
    retry_if: Callable[[Exception], bool] = field(default=default_retry_if)
    on_retry: Callable[[RetryInfo], None] | None = None

    def __post_init__(self) -> None:
        if self.max_attempts <= 0:
            logger.debug(
                f"Ignoring max_attempts={self.max_attempts}, "
                f"using default value {DEFAULT_MAX_ATTEMPTS}"
            )
            object.__setattr__(self, "max_attempts", DEFAULT_MAX_ATTEMPTS)
        if not callable(self.backoff):
            msg = f"backoff must be callable, got {self.backoff!r}"
            raise TypeError(msg)
        if not callable(self.retry_if):
            msg = f"retry_if must be callable, got {self.retry_if!r}"
            raise TypeError(msg)

    def merge(self, **overrides: Any) -> RetryConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied. A ``max_attempts``
        override <= 0 is ignored and keeps the current value.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new RetryConfig instance with overrides applied.

        Raises:
            TypeError: If an override does not name a configuration field.

        Example:
            ```pycon
            >>> from aretry.config import RetryConfig
            >>> config = RetryConfig(max_attempts=4)
            >>> config.merge(max_attempts=-1).max_attempts
            4
            >>> config.merge(max_attempts=6).max_attempts
            6

            ```
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        if filtered_overrides.get("max_attempts", 1) <= 0:
            del filtered_overrides["max_attempts"]
        return replace(self, **filtered_overrides)
