r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy", "validate_delays"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy determines how long to wait before the next attempt
    of a failed operation based on the attempt number. Strategies are pure
    and hold no mutable state, so a single instance can be shared by any
    number of concurrent retry loops.

    Strategies are callable: ``strategy(attempt)`` is equivalent to
    ``strategy.calculate(attempt)``, so they can be used anywhere a plain
    ``attempt -> seconds`` function is expected.
    """

    def __call__(self, attempt: int) -> float:
        return self.calculate(attempt)

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the backoff delay for a given attempt.

        Args:
            attempt: The attempt number that just failed (0-indexed). For
                example, attempt=0 is the wait after the first failure.

        Returns:
            The delay in seconds before the next attempt. Never negative.
        """


def validate_delays(base_delay: float, max_delay: float | None) -> None:
    r"""Validate the delay parameters shared by the growing strategies.

    Args:
        base_delay: The base delay in seconds. Must be >= 0.
        max_delay: Optional ceiling in seconds. Must be > 0 if provided.

    Raises:
        ValueError: If ``base_delay`` is negative or ``max_delay`` is
            non-positive.
    """
    if base_delay < 0:
        msg = f"base_delay must be non-negative, got {base_delay}"
        raise ValueError(msg)
    if max_delay is not None and max_delay <= 0:
        msg = f"max_delay must be positive if specified, got {max_delay}"
        raise ValueError(msg)
