r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, validate_delays


class FibonacciBackoff(BaseBackoffStrategy):
    """Fibonacci backoff strategy.

    Calculates delay as: base_delay * fibonacci(attempt + 1), with optional
    max_delay cap. The sequence (1, 1, 2, 3, 5, 8, ...) grows more gently
    than exponential backoff.

    Args:
        base_delay: The base delay in seconds (default: 1.0).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from aretry.backoff import FibonacciBackoff
        >>> backoff = FibonacciBackoff(base_delay=1.0)
        >>> [backoff.calculate(i) for i in range(5)]
        [1.0, 1.0, 2.0, 3.0, 5.0]
        >>> FibonacciBackoff(base_delay=1.0, max_delay=10.0).calculate(10)
        10.0

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        validate_delays(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay})"
        )

    @staticmethod
    def _fibonacci(n: int) -> int:
        """Return the nth Fibonacci number (1-indexed)."""
        if n <= 0:
            return 0
        a, b = 0, 1
        for _ in range(n - 1):
            a, b = b, a + b
        return b

    def calculate(self, attempt: int) -> float:
        delay = self.base_delay * self._fibonacci(attempt + 1)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
