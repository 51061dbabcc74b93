"""Theme and pain-point extraction from post text."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Sequence

from .lexicon import Lexicon, get_lexicon
from .models import RawPost
from .sentiment import tokenize

MAX_THEMES = 6
MIN_THEME_LENGTH = 4

MAX_PAIN_POINTS = 6
PAIN_SENTENCE_MIN = 10  # exclusive
PAIN_SENTENCE_MAX = 100  # exclusive
PAIN_EXCERPT_CHARS = 80

SENTENCE_SPLIT = re.compile(r"[.!?]")


def extract_themes(posts: Sequence[RawPost], lexicon: Lexicon | None = None) -> list[str]:
    """Most frequent title keywords.

    Only titles are read. Stop words and tokens of three characters or fewer
    are dropped. Ties keep first-seen order.
    """
    lexicon = lexicon or get_lexicon()
    counts: Counter[str] = Counter()

    for post in posts:
        for token in tokenize(post.title):
            if len(token) >= MIN_THEME_LENGTH and token not in lexicon.stop_words:
                counts[token] += 1

    # most_common is stable: equal counts stay in insertion order
    return [word for word, _ in counts.most_common(MAX_THEMES)]


def _excerpt_for(text: str, keyword: str, keywords: Sequence[str]) -> str | None:
    """Truncated first sentence mentioning the keyword, or None.

    The excerpt is dropped when the cut leaves no pain keyword in it.
    """
    for sentence in SENTENCE_SPLIT.split(text):
        if keyword in sentence and PAIN_SENTENCE_MIN < len(sentence) < PAIN_SENTENCE_MAX:
            excerpt = sentence.strip()[:PAIN_EXCERPT_CHARS]
            return excerpt if any(k in excerpt for k in keywords) else None
    return None


def pain_point_for_post(post: RawPost, keywords: Sequence[str]) -> str | None:
    """Excerpt for the highest-priority pain keyword found in a post.

    Keywords are scanned in order and only the first one present in the text
    is considered, even if it yields no usable sentence.
    """
    text = post.text.lower()
    for keyword in keywords:
        if keyword in text:
            return _excerpt_for(text, keyword, keywords)
    return None


def extract_pain_points(posts: Sequence[RawPost], lexicon: Lexicon | None = None) -> list[str]:
    """Deduplicated pain-point excerpts, in first-seen order."""
    lexicon = lexicon or get_lexicon()
    excerpts: dict[str, None] = {}

    for post in posts:
        excerpt = pain_point_for_post(post, lexicon.pain_keywords)
        if excerpt:
            excerpts.setdefault(excerpt, None)

    return list(excerpts)[:MAX_PAIN_POINTS]
