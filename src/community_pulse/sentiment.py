"""Lexicon-based sentiment heuristic.

A small, deterministic scorer: no part-of-speech tagging and no model. The
steps run in a fixed order because the intensifier and negation rules
multiply the running score.
"""

from __future__ import annotations

import re

from .lexicon import Lexicon, get_lexicon
from .models import ClassifiedPost, RawPost, SentimentLabel, SentimentResult

TOKEN_SPLIT = re.compile(r"\W+")

POSITIVE_THRESHOLD = 2.0
NEGATIVE_THRESHOLD = -2.0

EXCLAMATION_BONUS = 0.5
QUESTION_PENALTY = 0.2
INTENSIFIER_WORD = "very"
INTENSIFIER_FACTOR = 1.5
NEGATION_WORD = "not"
NEGATION_FACTOR = -0.8


def tokenize(text: str) -> list[str]:
    """Lowercase and split on non-word runs, dropping empty tokens."""
    return [token for token in TOKEN_SPLIT.split(text.lower()) if token]


def label_for_score(score: float) -> SentimentLabel:
    """Map an accumulated score onto the three sentiment classes."""
    if score >= POSITIVE_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score <= NEGATIVE_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


def score_text(text: str, lexicon: Lexicon) -> float:
    """Compute the raw sentiment score of a text."""
    tokens = tokenize(text)
    score = 0.0

    for token in tokens:
        if token in lexicon.positive_words:
            score += 1
        if token in lexicon.negative_words:
            score -= 1

    if "!" in text:
        score += EXCLAMATION_BONUS
    if "?" in text:
        score -= QUESTION_PENALTY

    words = set(tokens)
    if INTENSIFIER_WORD in words:
        score *= INTENSIFIER_FACTOR
    if NEGATION_WORD in words:
        score *= NEGATION_FACTOR

    for emoji, emoji_score in lexicon.emoji_scores.items():
        if emoji in text:
            score += emoji_score

    return score


def classify_text(text: str, lexicon: Lexicon | None = None) -> SentimentResult:
    """Classify one text.

    Args:
        text: Title and body of a post (may be empty)
        lexicon: Scoring vocabulary (uses the process-wide lexicon if None)

    Returns:
        SentimentResult with label and raw score
    """
    lexicon = lexicon or get_lexicon()
    score = score_text(text, lexicon)
    return SentimentResult(label=label_for_score(score), score=score)


def classify_post(post: RawPost, lexicon: Lexicon | None = None) -> ClassifiedPost:
    """Classify a post from its concatenated title and body."""
    result = classify_text(post.text, lexicon)
    return ClassifiedPost(post=post, label=result.label, sentiment_score=result.score)
