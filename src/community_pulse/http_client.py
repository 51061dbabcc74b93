"""Centralized HTTP client configuration for the Reddit API.

Provides a configured httpx.AsyncClient with:
- Connection limits
- Timeouts sized for a single request/response cycle
- A descriptive User-Agent, which Reddit requires for API access
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(
    timeout=15.0,  # Total timeout
    connect=5.0,  # Connection timeout
    read=10.0,  # Read timeout
    write=5.0,  # Write timeout
)

DEFAULT_LIMITS = httpx.Limits(
    max_connections=10,
    max_keepalive_connections=5,
    keepalive_expiry=30.0,
)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Accept-Language": "en-US,en;q=0.9",
}

DEFAULT_USER_AGENT = "community-pulse/1.0"


@asynccontextmanager
async def create_http_client(
    user_agent: str | None = None,
    timeout: httpx.Timeout | None = None,
    limits: httpx.Limits | None = None,
    extra_headers: dict | None = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Create a configured HTTP client for the Reddit API.

    Args:
        user_agent: Custom user agent (uses default if not provided)
        timeout: Custom timeout config (uses DEFAULT_TIMEOUT if not provided)
        limits: Custom connection limits (uses DEFAULT_LIMITS if not provided)
        extra_headers: Additional headers to include

    Yields:
        Configured httpx.AsyncClient
    """
    headers = DEFAULT_HEADERS.copy()
    headers["User-Agent"] = user_agent or DEFAULT_USER_AGENT

    if extra_headers:
        headers.update(extra_headers)

    client = httpx.AsyncClient(
        timeout=timeout or DEFAULT_TIMEOUT,
        limits=limits or DEFAULT_LIMITS,
        headers=headers,
        follow_redirects=True,
    )

    logger.debug("http_client_created", user_agent=headers["User-Agent"][:50])

    try:
        yield client
    finally:
        await client.aclose()
        logger.debug("http_client_closed")


def parse_retry_after(response: httpx.Response) -> float | None:
    """Parse Retry-After header from response.

    Args:
        response: HTTP response

    Returns:
        Seconds to wait, or None if header not present/parseable
    """
    retry_after = response.headers.get("Retry-After")
    if not retry_after:
        return None

    try:
        return float(retry_after)
    except ValueError:
        pass

    try:
        # HTTP-date form, e.g. "Wed, 21 Oct 2015 07:28:00 GMT"
        dt = parsedate_to_datetime(retry_after)
        delta = (dt - datetime.now(UTC)).total_seconds()
        return max(0.0, delta)
    except (ValueError, TypeError):
        pass

    return None
