"""Retry policy for Reddit API requests.

Retries transient failures (network errors, 5xx, 429) with exponential
backoff and jitter, honoring Retry-After on rate limits.
"""

from __future__ import annotations

import httpx
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .errors import RateLimitError, UpstreamAuthError, UpstreamFetchError
from .http_client import parse_retry_after
from .logging_config import get_logger

logger = get_logger(__name__)

# Transient HTTP exceptions that should trigger retries
HTTP_TRANSIENT_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.PoolTimeout,
    httpx.NetworkError,
)

MAX_RETRY_AFTER = 60.0

_backoff = wait_exponential_jitter(initial=1, max=30, jitter=2)


def is_transient(exc: BaseException) -> bool:
    """Whether an exception is worth retrying."""
    if isinstance(exc, HTTP_TRANSIENT_EXCEPTIONS):
        return True
    if isinstance(exc, RateLimitError):
        return True
    return isinstance(exc, UpstreamFetchError) and (exc.status_code or 0) >= 500


def wait_for_retry(retry_state: RetryCallState) -> float:
    """Use Retry-After when the server sent one, exponential backoff otherwise."""
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(exception, RateLimitError) and exception.retry_after is not None:
        return min(exception.retry_after, MAX_RETRY_AFTER)
    return _backoff(retry_state)


def log_retry_attempt(retry_state: RetryCallState) -> None:
    """Log retry attempts with context."""
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    wait_time = retry_state.next_action.sleep if retry_state.next_action else 0

    logger.warning(
        "retry_attempt",
        attempt=retry_state.attempt_number,
        wait_seconds=round(wait_time, 2),
        exception_type=type(exception).__name__ if exception else None,
        exception_msg=str(exception)[:100] if exception else None,
    )


http_retry = retry(
    reraise=True,
    stop=stop_after_attempt(4),
    wait=wait_for_retry,
    retry=retry_if_exception(is_transient),
    before_sleep=log_retry_attempt,
)


def check_response_for_retry(response: httpx.Response) -> None:
    """Check response status and raise the matching upstream error.

    Raises:
        RateLimitError: For 429 responses (retried)
        UpstreamFetchError: For 5xx (retried) and other non-success responses (not retried)
        UpstreamAuthError: For 401 responses (expired or revoked token)
    """
    if response.is_success:
        return

    if response.status_code == 429:
        raise RateLimitError(
            "Reddit API rate limited (429)",
            status_code=429,
            retry_after=parse_retry_after(response),
        )

    if response.status_code == 401:
        raise UpstreamAuthError("Reddit API rejected the access token (401)")

    raise UpstreamFetchError(
        f"Reddit API error: {response.status_code}",
        status_code=response.status_code,
    )
