r"""Backoff strategies for retry delays.

This package provides the strategies used to compute how long to wait
between two attempts: constant, exponential, exponential with jitter,
linear, and Fibonacci backoff patterns.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "ExponentialJitterBackoff",
    "FibonacciBackoff",
    "LinearBackoff",
]

from aretry.backoff.base import BaseBackoffStrategy
from aretry.backoff.constant import ConstantBackoff
from aretry.backoff.exponential import ExponentialBackoff
from aretry.backoff.fibonacci import FibonacciBackoff
from aretry.backoff.jitter import ExponentialJitterBackoff
from aretry.backoff.linear import LinearBackoff
