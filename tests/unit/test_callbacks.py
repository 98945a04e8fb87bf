r"""Unit tests for the on_retry observer invocation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from unittest.mock import Mock

from aretry.callbacks import RetryInfo, invoke_on_retry

if TYPE_CHECKING:
    import pytest


def test_invoke_on_retry_none() -> None:
    invoke_on_retry(None, attempt=0, max_attempts=3, error=ValueError(), wait_time=1.0)


def test_invoke_on_retry_builds_retry_info(mock_callback: Mock) -> None:
    """Test that the callback receives a 1-indexed attempt."""
    error = ValueError("boom")
    invoke_on_retry(mock_callback, attempt=0, max_attempts=3, error=error, wait_time=0.5)

    mock_callback.assert_called_once_with(
        RetryInfo(attempt=1, max_attempts=3, error=error, wait_time=0.5)
    )


def test_invoke_on_retry_failing_callback_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Test that an exception raised by the callback does not
    propagate."""
    callback = Mock(side_effect=RuntimeError("observer failed"))
    with caplog.at_level(logging.ERROR, logger="aretry.callbacks"):
        invoke_on_retry(callback, attempt=1, max_attempts=3, error=ValueError(), wait_time=0.1)

    callback.assert_called_once()
    assert "on_retry callback failed for attempt 2" in caplog.text
