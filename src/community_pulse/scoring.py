"""Sentiment aggregation, engagement and the Community Positivity Score.

All weights and cutoffs below are product constants without a statistical
derivation. They are kept exactly as shipped so scores stay comparable
between releases; change them only with product guidance.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .models import ClassifiedPost, RawPost, SentimentLabel

# Engagement: popularity saturates at 50 average upvotes, velocity at 10 posts/week.
POPULARITY_WEIGHT = 0.6
VELOCITY_WEIGHT = 0.4
POPULARITY_SATURATION = 50
VELOCITY_SATURATION = 10

# Composite
POSITIVE_SHARE_WEIGHT = 0.7
LOW_NEGATIVITY_WEIGHT = 0.3
SENTIMENT_CORE_WEIGHT = 0.8
ENGAGEMENT_WEIGHT = 0.2

# Confidence tiers. The 20-post cutoff is a tunable threshold, not a derived one.
CONFIDENCE_THRESHOLD = 20
LOW_CONFIDENCE = 0.5
HIGH_CONFIDENCE = 0.7


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    Python's ``round`` uses banker's rounding; the dashboard's scores were
    always produced with half-up rounding.
    """
    return math.floor(value + 0.5)


def divisor(count: int) -> int:
    """Post count used for means and shares; never zero."""
    return max(count, 1)


@dataclass(frozen=True)
class SentimentBreakdown:
    """Label counts and their normalized percentages."""

    positive_count: int
    neutral_count: int
    negative_count: int
    positive_percent: int
    neutral_percent: int
    negative_percent: int

    @property
    def count(self) -> int:
        return self.positive_count + self.neutral_count + self.negative_count


def aggregate_sentiment(posts: Sequence[ClassifiedPost]) -> SentimentBreakdown:
    """Count labels and convert them into percentages summing to 100.

    The neutral share is derived as the remainder rather than from its own
    count. This is a deliberate normalization: the three shares always sum to
    exactly 100 even though the positive and negative shares round
    independently.
    """
    positive = sum(1 for p in posts if p.label is SentimentLabel.POSITIVE)
    negative = sum(1 for p in posts if p.label is SentimentLabel.NEGATIVE)
    neutral = len(posts) - positive - negative

    total = divisor(len(posts))
    positive_percent = round_half_up(positive / total * 100)
    negative_percent = round_half_up(negative / total * 100)
    neutral_percent = 100 - positive_percent - negative_percent

    return SentimentBreakdown(
        positive_count=positive,
        neutral_count=neutral,
        negative_count=negative,
        positive_percent=positive_percent,
        neutral_percent=neutral_percent,
        negative_percent=negative_percent,
    )


def engagement_score(posts: Sequence[RawPost], window_weeks: float = 4.0) -> int:
    """Popularity/velocity signal in [0, 100].

    Args:
        posts: Posts in the batch
        window_weeks: Length of the lookback window in weeks

    Returns:
        Engagement score; each sub-signal is capped so one viral post cannot dominate
    """
    if window_weeks <= 0:
        raise ValueError(f"window_weeks must be positive, got {window_weeks}")

    total = divisor(len(posts))
    avg_popularity = sum(p.score for p in posts) / total
    posts_per_week = total / window_weeks

    raw = POPULARITY_WEIGHT * min(1, avg_popularity / POPULARITY_SATURATION) + VELOCITY_WEIGHT * min(
        1, posts_per_week / VELOCITY_SATURATION
    )
    return round_half_up(100 * raw)


def sentiment_core(positive_percent: int, negative_percent: int) -> int:
    """Reward positive share directly and low negativity indirectly."""
    return round_half_up(POSITIVE_SHARE_WEIGHT * positive_percent + LOW_NEGATIVITY_WEIGHT * (100 - negative_percent))


def composite_score(positive_percent: int, negative_percent: int, engagement: int) -> int:
    """Community Positivity Score (CPS) in [0, 100]."""
    core = sentiment_core(positive_percent, negative_percent)
    cps = round_half_up(SENTIMENT_CORE_WEIGHT * core + ENGAGEMENT_WEIGHT * engagement)
    return min(100, max(0, cps))


def confidence_for(total_posts: int) -> float:
    """Two-tier confidence: low below the post-count cutoff, high at or above it."""
    return LOW_CONFIDENCE if total_posts < CONFIDENCE_THRESHOLD else HIGH_CONFIDENCE
