r"""Cancellation tokens for interrupting retry loops.

A ``CancellationToken`` is a thread-safe signal that can be triggered
explicitly with ``cancel()`` or automatically when its deadline passes.
The same token is handed to the retry loop and to the wrapped operation,
so both can observe the cancellation. The loop races its backoff wait
against the token and returns as soon as the token fires.

Tokens never start threads. Deadlines are checked against the monotonic
clock whenever the token is queried or waited on.

Example:
    ```pycon
    >>> from aretry.cancellation import CancellationToken
    >>> token = CancellationToken()
    >>> token.is_cancelled
    False
    >>> token.cancel()
    >>> token.is_cancelled
    True
    >>> token.cause
    TokenCancelledError('token cancelled')
    >>> CancellationToken(timeout=0).is_cancelled
    True

    ```
"""

from __future__ import annotations

__all__ = ["CancellationToken", "TokenCancelledError", "TokenDeadlineExceededError"]

import logging
import threading
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class TokenCancelledError(Exception):
    """Cause reported by a token that was cancelled explicitly."""

    def __init__(self, message: str = "token cancelled") -> None:
        super().__init__(message)


class TokenDeadlineExceededError(Exception):
    """Cause reported by a token whose deadline has passed."""

    def __init__(self, message: str = "token deadline exceeded") -> None:
        super().__init__(message)


class CancellationToken:
    r"""Cooperative cancellation signal with an optional deadline.

    Args:
        timeout: Optional number of seconds after which the token cancels
            itself with a ``TokenDeadlineExceededError`` cause. Must be
            >= 0 if provided.
        parent: Optional parent token. Cancelling the parent cancels this
            token with the same cause, and this token's deadline is never
            later than the parent's.

    Raises:
        ValueError: If ``timeout`` is negative.

    Example:
        ```pycon
        >>> from aretry.cancellation import CancellationToken
        >>> parent = CancellationToken()
        >>> child = parent.child(timeout=30.0)
        >>> parent.cancel()
        >>> child.is_cancelled
        True

        ```
    """

    def __init__(
        self, timeout: float | None = None, parent: CancellationToken | None = None
    ) -> None:
        if timeout is not None and timeout < 0:
            msg = f"timeout must be >= 0, got {timeout}"
            raise ValueError(msg)

        self._lock = threading.Lock()
        self._event = threading.Event()
        self._cause: BaseException | None = None
        self._callbacks: list[Callable[[], None]] = []

        deadline = None if timeout is None else time.monotonic() + timeout
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline: float | None = deadline

        self._unregister_parent: Callable[[], None] = lambda: None
        if parent is not None:
            self._unregister_parent = parent.add_callback(self._cancel_from_parent(parent))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(cancelled={self.is_cancelled}, "
            f"remaining={self.remaining()})"
        )

    @property
    def is_cancelled(self) -> bool:
        """``True`` once the token was cancelled or its deadline passed."""
        if self._event.is_set():
            return True
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            self._expire()
            return True
        return False

    @property
    def cause(self) -> BaseException | None:
        """The cancellation cause, or ``None`` while the token is active."""
        if not self.is_cancelled:
            return None
        return self._cause

    def child(self, timeout: float | None = None) -> CancellationToken:
        """Create a token cancelled together with this one.

        Args:
            timeout: Optional extra deadline for the child, in seconds.

        Returns:
            The derived token.
        """
        return CancellationToken(timeout=timeout, parent=self)

    def remaining(self) -> float | None:
        """Return the seconds left before the deadline, or ``None`` without
        deadline.

        The value is negative once the deadline has passed.
        """
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def cancel(self, cause: BaseException | None = None) -> None:
        """Cancel the token.

        Cancelling is idempotent and the first cause wins.

        Args:
            cause: Optional cancellation cause. Defaults to a
                ``TokenCancelledError``. Any other exception is reported
                verbatim to the retry loop.
        """
        self._trigger(TokenCancelledError() if cause is None else cause)

    def raise_if_cancelled(self) -> None:
        """Raise the cancellation cause if the token is cancelled.

        Operations can call this to cooperate with the retry loop.
        """
        if self.is_cancelled and self._cause is not None:
            raise self._cause

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the token is cancelled or ``timeout`` elapses.

        The wait returns as soon as ``cancel()`` is called from another
        thread, or when the deadline passes, whichever comes first.

        Args:
            timeout: Maximum number of seconds to wait. ``None`` waits
                until the token is cancelled.

        Returns:
            ``True`` if the token is cancelled, ``False`` if the timeout
            elapsed first.
        """
        remaining = self.remaining()
        if remaining is not None and (timeout is None or remaining <= timeout):
            if not self._event.wait(max(remaining, 0.0)):
                self._expire()
            return True
        return self._event.wait(timeout)

    def add_callback(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a function called once when the token is cancelled.

        The callback runs immediately if the token is already cancelled.
        Callbacks run in the thread that cancels the token and must not
        block.

        Args:
            callback: A function without arguments.

        Returns:
            A function that unregisters the callback.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)
        callback()
        return lambda: None

    def _remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def _cancel_from_parent(self, parent: CancellationToken) -> Callable[[], None]:
        def propagate() -> None:
            self._trigger(parent._cause or TokenCancelledError())  # noqa: SLF001

        return propagate

    def _expire(self) -> None:
        self._trigger(TokenDeadlineExceededError())

    def _trigger(self, cause: BaseException) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._cause = cause
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        logger.debug(f"Cancellation token triggered ({cause!r})")
        self._unregister_parent()
        self._unregister_parent = lambda: None
        for callback in callbacks:
            callback()
