"""Exception taxonomy for the aggregation engine and its upstream fetch."""

from __future__ import annotations


class CommunityPulseError(Exception):
    """Base class for all Community Pulse errors."""


class UpstreamError(CommunityPulseError):
    """The post source failed as a whole (batch-level failure)."""


class UpstreamAuthError(UpstreamError):
    """Source-platform credentials are missing, invalid or expired."""


class UpstreamFetchError(UpstreamError):
    """Network, server or rate-limit failure while fetching posts."""

    def __init__(self, message: str, status_code: int | None = None, retry_after: float | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


class RateLimitError(UpstreamFetchError):
    """Rate limit (429) error with optional Retry-After."""

    pass


class EmptyResultError(CommunityPulseError):
    """Zero posts matched the query. Not a failure."""


class MalformedPostError(CommunityPulseError, ValueError):
    """A single post is missing required fields or was flagged by the source."""

    def __init__(self, message: str, post_id: str | None = None):
        super().__init__(message)
        self.post_id = post_id
