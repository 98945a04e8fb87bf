from __future__ import annotations

import logging
import sys

import httpx

import aretry
from aretry.backoff import ExponentialJitterBackoff
from aretry.http import HttpError, is_retryable_http_error

logger: logging.Logger = logging.getLogger(__name__)

# Use httpbin.org for real HTTP testing
HTTPBIN_URL = "https://httpbin.org"


def fetch_status(client: httpx.Client, path: str) -> int:
    response = client.get(f"{HTTPBIN_URL}{path}")
    if response.status_code >= 400:
        raise HttpError(response.status_code, f"GET {path} failed")
    return response.status_code


def check_retry() -> None:
    logger.info("Checking retry...")
    with httpx.Client(timeout=10.0) as client:
        status = aretry.retry(
            lambda: fetch_status(client, "/get"),
            max_attempts=5,
            backoff=ExponentialJitterBackoff(base_delay=0.5, max_delay=5.0, jitter=0.2),
            retry_if=is_retryable_http_error,
        )
    assert status == 200


def check_retry_with_token() -> None:
    logger.info("Checking retry_with_token...")
    token = aretry.CancellationToken(timeout=30.0)
    with httpx.Client(timeout=10.0) as client:
        try:
            aretry.retry_with_token(
                token,
                lambda token: fetch_status(client, "/status/503"),
                max_attempts=2,
                backoff=ExponentialJitterBackoff(base_delay=0.5, max_delay=5.0, jitter=0.2),
                retry_if=is_retryable_http_error,
            )
        except aretry.MaxAttemptsReachedError as exc:
            assert isinstance(exc.last_error, HttpError)
            assert exc.last_error.status_code == 503
        else:
            msg = "expected MaxAttemptsReachedError"
            raise AssertionError(msg)


def main() -> None:
    r"""Run all package checks to validate installation and
    functionality."""
    try:
        check_retry()
        check_retry_with_token()

        logger.info("✅ All package checks passed successfully!")
    except Exception:
        logger.exception("❌ Package check failed")
        sys.exit(1)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
