r"""Retry loop core implementing class-based composition pattern.

Public API:
    - RetryDecider: Logic for deciding whether to retry
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
"""

from __future__ import annotations

__all__ = ["AsyncRetryExecutor", "RetryDecider", "RetryExecutor"]

from aretry.core.decider import RetryDecider
from aretry.core.executor import RetryExecutor
from aretry.core.executor_async import AsyncRetryExecutor
