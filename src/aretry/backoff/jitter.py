r"""Exponential backoff strategy with random jitter."""

from __future__ import annotations

__all__ = ["ExponentialJitterBackoff"]

import random

from aretry.backoff.base import BaseBackoffStrategy, validate_delays
from aretry.backoff.exponential import exponential_delay


class ExponentialJitterBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy with jitter.

    The delay is drawn uniformly from ``[backoff * (1 - jitter), backoff]``
    where ``backoff = min(base_delay * 2 ** attempt, max_delay)``. The random
    spread keeps many callers that failed together from retrying in
    lockstep against the same service.

    The same attempt can yield different delays across calls. The draw
    uses the module-level ``random`` generator and needs no seeding.

    Args:
        base_delay: The base delay factor in seconds.
        max_delay: The maximum delay cap in seconds.
        jitter: The fraction of the backoff that may be subtracted at
            random. Values outside ``[0, 1]`` are clamped.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialJitterBackoff
        >>> backoff = ExponentialJitterBackoff(base_delay=1.0, max_delay=10.0, jitter=0.5)
        >>> 2.0 <= backoff.calculate(2) <= 4.0
        True
        >>> backoff = ExponentialJitterBackoff(base_delay=1.0, max_delay=10.0, jitter=0.0)
        >>> backoff.calculate(2)
        4.0

        ```
    """

    def __init__(self, base_delay: float, max_delay: float, jitter: float = 0.1) -> None:
        validate_delays(base_delay, max_delay)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = min(max(jitter, 0.0), 1.0)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay}, jitter={self.jitter})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate a jittered exponential backoff delay.

        Args:
            attempt: The attempt number (0-indexed).

        Returns:
            A delay within ``[backoff * (1 - jitter), backoff]``.
        """
        backoff = exponential_delay(self.base_delay, attempt, self.max_delay)
        if self.jitter == 0.0:
            return backoff
        lower = backoff * (1.0 - self.jitter)
        return random.uniform(lower, backoff)  # noqa: S311
