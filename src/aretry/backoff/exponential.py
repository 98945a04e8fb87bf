r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff", "exponential_delay"]

from aretry.backoff.base import BaseBackoffStrategy, validate_delays


def exponential_delay(base_delay: float, attempt: int, max_delay: float | None) -> float:
    r"""Compute ``base_delay * 2 ** attempt`` capped at ``max_delay``.

    Growth beyond the float range is capped instead of raising
    ``OverflowError``.

    Args:
        base_delay: The base delay in seconds.
        attempt: The attempt number (0-indexed).
        max_delay: Optional ceiling in seconds.

    Returns:
        The capped delay in seconds.

    Example:
        ```pycon
        >>> from aretry.backoff.exponential import exponential_delay
        >>> exponential_delay(0.5, 3, None)
        4.0
        >>> exponential_delay(0.5, 3, 2.0)
        2.0

        ```
    """
    try:
        delay = base_delay * (2.0**attempt)
    except OverflowError:
        delay = float("inf") if base_delay > 0 else 0.0
    if max_delay is not None:
        delay = min(delay, max_delay)
    return delay


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (2 ** attempt), with optional max_delay cap.

    Args:
        base_delay: The base delay factor in seconds (default: 0.1).
        max_delay: Optional maximum delay cap in seconds. If specified,
            delays will not exceed this value, including at the first attempt.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5)
        >>> backoff.calculate(0)
        0.5
        >>> backoff.calculate(1)
        1.0
        >>> backoff.calculate(2)
        2.0
        >>> backoff = ExponentialBackoff(base_delay=1.0, max_delay=5.0)
        >>> backoff.calculate(10)
        5.0

        ```
    """

    def __init__(self, base_delay: float = 0.1, max_delay: float | None = None) -> None:
        validate_delays(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The attempt number (0-indexed).

        Returns:
            The calculated delay: base_delay * (2 ** attempt),
            capped at max_delay if set.
        """
        return exponential_delay(self.base_delay, attempt, self.max_delay)
