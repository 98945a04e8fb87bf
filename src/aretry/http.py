r"""HTTP-oriented retry predicates.

This module provides ready-made ``retry_if`` predicates for operations
that talk to HTTP services, plus a small ``HttpError`` exception carrying
a status code. They are regular predicates: the retry loop only calls them
and never depends on them.

Example:
    ```pycon
    >>> from aretry import retry
    >>> from aretry.backoff import ExponentialJitterBackoff
    >>> from aretry.http import HttpError, is_retryable_http_error
    >>> def call_service() -> str:
    ...     raise HttpError(404, "not found")
    ...
    >>> retry(
    ...     call_service,
    ...     max_attempts=5,
    ...     backoff=ExponentialJitterBackoff(base_delay=0.1, max_delay=5.0, jitter=0.2),
    ...     retry_if=is_retryable_http_error,
    ... )
    Traceback (most recent call last):
        ...
    aretry.http.HttpError: not found

    ```
"""

from __future__ import annotations

__all__ = [
    "RETRY_STATUS_CODES",
    "HttpError",
    "is_http_retryable",
    "is_network_error",
    "is_retryable_http_error",
]

import errno
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from collections.abc import Iterator

# HTTP status codes that are retryable besides the whole 5xx range
# 408: Request Timeout
# 429: Too Many Requests - Rate limiting
RETRY_STATUS_CODES = (httpx.codes.REQUEST_TIMEOUT, httpx.codes.TOO_MANY_REQUESTS)

_NETWORK_ERRNOS = frozenset(
    {errno.ECONNRESET, errno.ECONNABORTED, errno.ECONNREFUSED, errno.ETIMEDOUT}
)

_NETWORK_EXCEPTIONS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    TimeoutError,
    ConnectionResetError,
    ConnectionAbortedError,
    ConnectionRefusedError,
)


class HttpError(Exception):
    """Exception carrying the status code of a failed HTTP exchange.

    Args:
        status_code: The HTTP status code.
        message: A descriptive error message.

    Example:
        ```pycon
        >>> from aretry.http import HttpError
        >>> error = HttpError(503, "service unavailable")
        >>> error.status_code
        503
        >>> str(error)
        'service unavailable'

        ```
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(status_code={self.status_code}, "
            f"message={self.message!r})"
        )


def _iter_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield ``error`` and the exceptions it was raised from or during."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def is_network_error(error: BaseException | None) -> bool:
    """Indicate if an exception is a transient network failure.

    Timeouts, connection resets, aborted and refused connections are
    considered transient. The ``__cause__``/``__context__`` chain is
    searched, so wrapped network errors are detected as well.

    Args:
        error: The exception to check.

    Returns:
        ``True`` for a transient network failure, otherwise ``False``.

    Example:
        ```pycon
        >>> import httpx
        >>> from aretry.http import is_network_error
        >>> is_network_error(httpx.ConnectTimeout("timed out"))
        True
        >>> is_network_error(ConnectionResetError())
        True
        >>> is_network_error(ValueError("bad"))
        False
        >>> is_network_error(None)
        False

        ```
    """
    if error is None:
        return False
    for exc in _iter_chain(error):
        if isinstance(exc, _NETWORK_EXCEPTIONS):
            return True
        if isinstance(exc, OSError) and exc.errno in _NETWORK_ERRNOS:
            return True
    return False


def is_http_retryable(status_code: int) -> bool:
    """Indicate if an HTTP status code is worth retrying.

    Server errors (5xx), 408 Request Timeout and 429 Too Many Requests are
    retryable.

    Args:
        status_code: The HTTP status code.

    Returns:
        ``True`` if the status code is retryable.

    Example:
        ```pycon
        >>> from aretry.http import is_http_retryable
        >>> [is_http_retryable(code) for code in (200, 404, 408, 429, 500, 503)]
        [False, False, True, True, True, True]

        ```
    """
    return status_code >= httpx.codes.INTERNAL_SERVER_ERROR or status_code in RETRY_STATUS_CODES


def is_retryable_http_error(error: BaseException | None) -> bool:
    """Retry predicate for HTTP operations.

    An exception is retryable when it is a transient network failure, or
    an ``HttpError``/``httpx.HTTPStatusError`` with a retryable status
    code.

    Args:
        error: The exception raised by the operation.

    Returns:
        ``True`` if the exception is retryable.

    Example:
        ```pycon
        >>> from aretry.http import HttpError, is_retryable_http_error
        >>> is_retryable_http_error(HttpError(502, "bad gateway"))
        True
        >>> is_retryable_http_error(HttpError(400, "bad request"))
        False

        ```
    """
    if error is None:
        return False
    if is_network_error(error):
        return True
    for exc in _iter_chain(error):
        if isinstance(exc, HttpError):
            return is_http_retryable(exc.status_code)
        if isinstance(exc, httpx.HTTPStatusError):
            return is_http_retryable(exc.response.status_code)
    return False
