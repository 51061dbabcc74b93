"""Report assembly: metrics, themes, pain points, items and warnings."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from .lexicon import Lexicon, get_lexicon
from .logging_config import get_logger
from .models import (
    AggregateReport,
    AnalysisRequest,
    Citation,
    ClassifiedPost,
    Metric,
    RawPost,
    ReportItem,
)
from .reddit import build_search_query, post_url, search_url
from .scoring import (
    LOW_CONFIDENCE,
    CONFIDENCE_THRESHOLD,
    aggregate_sentiment,
    composite_score,
    confidence_for,
    engagement_score,
)
from .sentiment import classify_post
from .themes import extract_pain_points, extract_themes

logger = get_logger(__name__)

MAX_ITEMS = 10

SPARSE_WARNING = "Sparse results; signals may be noisy"
FALLBACK_WARNING = "Using fallback data due to Reddit API error. Results may be incomplete."

CITATION_LABEL = "Reddit Search API"
FALLBACK_CITATION_LABEL = "Reddit Search"

# (name, unit, explanation) in report order
METRIC_DEFINITIONS: tuple[tuple[str, str, str], ...] = (
    ("sentiment_positive", "%", "share of positive posts"),
    ("sentiment_neutral", "%", "share of neutral posts"),
    ("sentiment_negative", "%", "share of negative posts"),
    ("engagement_score", "/100", "avg upvotes & posts/week"),
    ("community_positivity_score", "/100", "0.8*sentiment_core+0.2*engagement"),
)

# Neutral baseline used when there is no data to score
BASELINE_VALUES: tuple[int, ...] = (0, 100, 0, 0, 0)


def _metrics(values: Sequence[int], confidence: float) -> tuple[Metric, ...]:
    return tuple(
        Metric(name=name, value=value, unit=unit, explanation=explanation, confidence=confidence)
        for (name, unit, explanation), value in zip(METRIC_DEFINITIONS, values, strict=True)
    )


def _published(created_utc: int) -> str:
    try:
        published = datetime.fromtimestamp(created_utc, UTC)
    except (ValueError, OverflowError, OSError):
        logger.debug("timestamp_out_of_range", created_utc=created_utc)
        return ""
    return published.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def report_item(classified: ClassifiedPost) -> ReportItem:
    """Render a classified post for the item list."""
    post = classified.post
    return ReportItem(
        title=post.title,
        snippet=post.body,
        url=post_url(post.permalink),
        published=_published(post.created_utc),
        source=f"r/{post.community}",
        evidence=(classified.label.value,),
        score=post.score,
        num_comments=post.num_comments,
    )


def assemble_report(
    classified: Sequence[ClassifiedPost],
    themes: Sequence[str],
    pain_points: Sequence[str],
    request: AnalysisRequest,
    window_weeks: float = 4.0,
    generated_at: datetime | None = None,
) -> AggregateReport:
    """Compose classified posts and extracted text signals into a report.

    An empty batch yields the neutral baseline (0% positive, 100% neutral,
    0% negative, engagement 0, CPS 0) with the sparse-data warning and no
    failure warning.

    Args:
        classified: Posts with sentiment, in source order
        themes: Output of extract_themes
        pain_points: Output of extract_pain_points
        request: The request the posts were fetched for
        window_weeks: Lookback window used for posting velocity
        generated_at: Report timestamp (defaults to now, UTC)

    Returns:
        Immutable AggregateReport
    """
    generated_at = generated_at or datetime.now(UTC)
    posts: list[RawPost] = [c.post for c in classified]
    total_posts = len(posts)

    if total_posts == 0:
        values: tuple[int, ...] = BASELINE_VALUES
        confidence = LOW_CONFIDENCE
        cps = 0
    else:
        breakdown = aggregate_sentiment(classified)
        engagement = engagement_score(posts, window_weeks)
        cps = composite_score(breakdown.positive_percent, breakdown.negative_percent, engagement)
        confidence = confidence_for(total_posts)
        values = (
            breakdown.positive_percent,
            breakdown.neutral_percent,
            breakdown.negative_percent,
            engagement,
            cps,
        )

    warnings = [SPARSE_WARNING] if total_posts < CONFIDENCE_THRESHOLD else []

    report = AggregateReport(
        generated_at=generated_at,
        filters=request,
        metrics=_metrics(values, confidence),
        themes=tuple(themes),
        pain_points=tuple(pain_points),
        items=tuple(report_item(c) for c in classified[:MAX_ITEMS]),
        citations=(Citation(label=CITATION_LABEL, url=search_url(build_search_query(request))),),
        warnings=tuple(warnings),
        total_posts=total_posts,
    )

    logger.info(
        "report_assembled",
        total_posts=total_posts,
        positive=values[0],
        neutral=values[1],
        negative=values[2],
        cps=cps,
        themes=len(report.themes),
        pain_points=len(report.pain_points),
    )
    return report


def build_report(
    posts: Sequence[RawPost],
    request: AnalysisRequest,
    window_weeks: float = 4.0,
    lexicon: Lexicon | None = None,
    generated_at: datetime | None = None,
) -> AggregateReport:
    """Run the whole pipeline sequentially over an in-memory batch."""
    lexicon = lexicon or get_lexicon()
    classified = [classify_post(post, lexicon) for post in posts]
    return assemble_report(
        classified,
        extract_themes(posts, lexicon),
        extract_pain_points(posts, lexicon),
        request,
        window_weeks=window_weeks,
        generated_at=generated_at,
    )


def fallback_report(
    request: AnalysisRequest,
    reason: str,
    generated_at: datetime | None = None,
) -> AggregateReport:
    """Degraded report for an upstream failure.

    Structurally identical to a real report so the dashboard can always
    render it; the failure is only visible through ``warnings``.
    """
    return AggregateReport(
        generated_at=generated_at or datetime.now(UTC),
        filters=request,
        metrics=_metrics(BASELINE_VALUES, LOW_CONFIDENCE),
        citations=(Citation(label=FALLBACK_CITATION_LABEL, url=search_url(build_search_query(request))),),
        warnings=(FALLBACK_WARNING, reason or "An unknown error occurred", SPARSE_WARNING),
        total_posts=0,
    )
