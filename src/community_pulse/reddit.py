"""Reddit search through the OAuth API (client-credentials grant).

This is the upstream collaborator of the aggregation engine: it turns an
AnalysisRequest into a list of RawPosts and raises UpstreamError subclasses
on batch-level failure.
"""

from __future__ import annotations

import html
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .config import Settings
from .errors import EmptyResultError, MalformedPostError, UpstreamAuthError, UpstreamFetchError
from .http_client import create_http_client
from .logging_config import get_logger
from .models import AnalysisRequest, RawPost
from .retry_policy import check_response_for_retry, http_retry

logger = get_logger(__name__)

REDDIT_WWW = "https://www.reddit.com"
REDDIT_OAUTH = "https://oauth.reddit.com"
TOKEN_URL = f"{REDDIT_WWW}/api/v1/access_token"
PUBLIC_SEARCH_URL = "https://reddit.com/search"

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_search_query(request: AnalysisRequest) -> str:
    """Join idea, industry and geography into one search string."""
    parts = [request.idea, request.industry, request.geography]
    return " ".join(part.strip() for part in parts if part and part.strip())


def search_url(query: str) -> str:
    """Public search page for a query, used as the report citation."""
    return f"{PUBLIC_SEARCH_URL}?q={quote(query, safe=_URI_COMPONENT_SAFE)}"


def post_url(permalink: str) -> str:
    """Absolute URL for a post permalink."""
    if permalink.startswith("http"):
        return permalink
    return f"https://reddit.com{permalink}"


async def get_access_token(client: httpx.AsyncClient, client_id: str, client_secret: str) -> str:
    """Obtain an application-only OAuth token.

    Raises:
        UpstreamAuthError: Credentials missing or rejected
    """
    if not client_id or not client_secret:
        raise UpstreamAuthError("Reddit credentials not configured")

    response = await client.post(
        TOKEN_URL,
        auth=(client_id, client_secret),
        data={"grant_type": "client_credentials", "scope": "read"},
    )
    if not response.is_success:
        raise UpstreamAuthError(f"Reddit auth failed: {response.status_code}")

    token = response.json().get("access_token")
    if not token:
        raise UpstreamAuthError("Reddit auth response did not include an access token")

    logger.debug("reddit_token_acquired")
    return token


@http_retry
async def search_posts(
    client: httpx.AsyncClient,
    token: str,
    query: str,
    time_window: str,
    limit: int,
) -> dict[str, Any]:
    """Run one search request and return the raw listing JSON."""
    logger.debug("reddit_search", query=query, time_window=time_window, limit=limit)

    response = await client.get(
        f"{REDDIT_OAUTH}/search",
        params={"q": query, "limit": limit, "sort": "relevance", "t": time_window},
        headers={"Authorization": f"Bearer {token}"},
    )
    check_response_for_retry(response)

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamFetchError(f"Reddit returned invalid JSON: {e}") from e


def parse_post(data: dict[str, Any] | None, body_max_chars: int = 500) -> RawPost:
    """Convert one listing child's ``data`` into a RawPost.

    Raises:
        MalformedPostError: Missing fields, NSFW, or removed by the source
    """
    if not data:
        raise MalformedPostError("listing child has no data")

    post_id = data.get("id")
    if data.get("over_18"):
        raise MalformedPostError("post flagged over_18", post_id=post_id)
    if data.get("removed") or data.get("removed_by_category"):
        raise MalformedPostError("post removed by source", post_id=post_id)

    missing = [key for key in ("id", "title", "permalink", "subreddit") if not data.get(key)]
    if missing:
        raise MalformedPostError(f"missing fields: {', '.join(missing)}", post_id=post_id)

    try:
        return RawPost(
            id=data["id"],
            title=html.unescape(data["title"]),
            body=html.unescape(data.get("selftext") or "")[:body_max_chars],
            community=data["subreddit"],
            score=int(data.get("score") or 0),
            num_comments=int(data.get("num_comments") or 0),
            created_utc=int(float(data.get("created_utc") or 0)),
            permalink=data["permalink"],
        )
    except (TypeError, ValueError, ValidationError) as e:
        raise MalformedPostError(f"invalid field value: {e}", post_id=post_id) from e


def parse_listing(listing: dict[str, Any], body_max_chars: int = 500) -> list[RawPost]:
    """Extract usable posts from a search listing, skipping malformed ones.

    Raises:
        UpstreamFetchError: The listing itself has an unexpected shape
    """
    try:
        children = listing["data"]["children"]
    except (KeyError, TypeError) as e:
        raise UpstreamFetchError("Unexpected Reddit listing shape") from e

    posts: list[RawPost] = []
    skipped = 0
    for child in children:
        try:
            data = child.get("data") if isinstance(child, dict) else None
            posts.append(parse_post(data, body_max_chars))
        except MalformedPostError as e:
            skipped += 1
            logger.debug("post_skipped", post_id=e.post_id, reason=str(e))

    logger.info("listing_parsed", posts=len(posts), skipped=skipped)
    return posts


async def fetch_posts(request: AnalysisRequest, settings: Settings) -> list[RawPost]:
    """Fetch and normalize search results for a request.

    Raises:
        UpstreamAuthError: Authentication failed
        UpstreamFetchError: Network, server or rate-limit failure
        EmptyResultError: The search matched no usable posts
    """
    query = build_search_query(request)
    time_window = request.time_window or settings.default_time_window
    logger.info("fetching_posts", query=query, time_window=time_window)

    async with create_http_client(user_agent=settings.user_agent) as client:
        try:
            token = await get_access_token(client, settings.reddit_client_id, settings.reddit_client_secret)
        except UpstreamAuthError as e:
            logger.error("reddit_auth_failed", error=str(e))
            raise UpstreamAuthError("Reddit authentication failed. Please check your credentials.") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Reddit auth request failed: {e}") from e

        try:
            listing = await search_posts(client, token, query, time_window, settings.search_limit)
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Reddit search request failed: {e}") from e

    posts = parse_listing(listing, settings.selftext_max_chars)
    if not posts:
        raise EmptyResultError(f"No usable posts matched '{query}'")
    return posts
