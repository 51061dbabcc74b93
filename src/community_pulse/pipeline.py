"""Request-level orchestration with async fan-out.

Per-post classification fans out over worker threads and is joined by
``asyncio.gather`` before any aggregate is computed. Theme and pain-point
extraction run alongside the fan-out. The upstream fetch runs under the
caller's deadline, and any upstream failure becomes a degraded report.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from functools import partial
from typing import Any

from pydantic import ValidationError

from .config import Settings, get_settings, window_weeks_for
from .errors import EmptyResultError, UpstreamError
from .lexicon import Lexicon, get_lexicon
from .logging_config import get_logger
from .models import AggregateReport, AnalysisRequest, ClassifiedPost, RawPost
from .reddit import fetch_posts
from .report import assemble_report, fallback_report
from .sentiment import classify_post
from .themes import extract_pain_points, extract_themes

logger = get_logger(__name__)

PostFetcher = Callable[[AnalysisRequest], Awaitable[list[RawPost]]]


def validate_posts(items: Sequence[Any]) -> list[RawPost]:
    """Validate caller-supplied posts one by one, dropping malformed entries."""
    posts: list[RawPost] = []
    for item in items:
        try:
            posts.append(RawPost.model_validate(item))
        except ValidationError as e:
            post_id = item.get("id") if isinstance(item, dict) else None
            logger.debug("post_skipped", post_id=post_id, reason=str(e))

    if len(posts) < len(items):
        logger.info("posts_validated", posts=len(posts), skipped=len(items) - len(posts))
    return posts


async def classify_posts(
    posts: Sequence[RawPost],
    lexicon: Lexicon,
    max_concurrency: int = 8,
) -> list[ClassifiedPost]:
    """Classify posts concurrently, returning results in input order."""
    sem = asyncio.Semaphore(max_concurrency)

    async def _classify(post: RawPost) -> ClassifiedPost:
        async with sem:
            return await asyncio.to_thread(classify_post, post, lexicon)

    return list(await asyncio.gather(*(_classify(post) for post in posts)))


async def run_analysis(
    posts: Sequence[RawPost],
    request: AnalysisRequest,
    window_weeks: float = 4.0,
    lexicon: Lexicon | None = None,
    max_concurrency: int = 8,
) -> AggregateReport:
    """Score an already-fetched batch of posts.

    Args:
        posts: Usable posts for the request
        request: The request the posts belong to
        window_weeks: Lookback window for posting velocity
        lexicon: Scoring vocabulary (process-wide default if None)
        max_concurrency: Maximum concurrent classifications

    Returns:
        AggregateReport for the batch
    """
    lexicon = lexicon or get_lexicon()

    classified, themes, pain_points = await asyncio.gather(
        classify_posts(posts, lexicon, max_concurrency),
        asyncio.to_thread(extract_themes, posts, lexicon),
        asyncio.to_thread(extract_pain_points, posts, lexicon),
    )
    return assemble_report(classified, themes, pain_points, request, window_weeks=window_weeks)


async def analyze_topic(
    request: AnalysisRequest,
    settings: Settings | None = None,
    fetcher: PostFetcher | None = None,
    lexicon: Lexicon | None = None,
    timeout: float | None = None,
) -> AggregateReport:
    """Fetch posts for a request and build its report.

    Upstream failures, fetch timeouts and scoring errors never propagate:
    they produce a fallback report whose warnings carry the failure reason.

    Args:
        request: What to search for
        settings: Application settings (loaded from the environment if None)
        fetcher: Coroutine returning posts for a request (Reddit search if None)
        lexicon: Scoring vocabulary (lexicon from settings if None)
        timeout: Fetch deadline in seconds (settings.fetch_timeout_seconds if None)

    Returns:
        AggregateReport, real or degraded
    """
    settings = settings or get_settings()
    fetcher = fetcher or partial(fetch_posts, settings=settings)
    lexicon = lexicon or get_lexicon(settings.lexicon_path)
    deadline = timeout if timeout is not None else settings.fetch_timeout_seconds
    window_weeks = window_weeks_for(request.time_window or settings.default_time_window)

    logger.info("analysis_starting", idea=request.idea, time_window=request.time_window, deadline=deadline)

    try:
        posts = await asyncio.wait_for(fetcher(request), timeout=deadline)
    except EmptyResultError:
        logger.info("no_posts_matched", idea=request.idea)
        posts = []
    except UpstreamError as e:
        logger.error("upstream_failed", error_type=type(e).__name__, error=str(e))
        return fallback_report(request, str(e))
    except TimeoutError:
        logger.error("upstream_timeout", deadline=deadline)
        return fallback_report(request, f"Timed out fetching posts after {deadline:g}s")
    except Exception as e:
        logger.exception("upstream_unexpected_error", error=str(e))
        return fallback_report(request, str(e) or type(e).__name__)

    try:
        return await run_analysis(
            posts,
            request,
            window_weeks=window_weeks,
            lexicon=lexicon,
            max_concurrency=settings.max_concurrency,
        )
    except Exception as e:
        logger.exception("analysis_failed", posts=len(posts), error=str(e))
        return fallback_report(request, str(e) or type(e).__name__)
