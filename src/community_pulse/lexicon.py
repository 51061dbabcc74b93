"""Lexicon provider: word lists, emoji scores and pain keywords.

The lexicon is data, not code. It ships as ``data/lexicon.json`` and is loaded
once per process by :func:`get_lexicon`. Every scorer takes a ``Lexicon``
argument so tests and callers can inject their own.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LEXICON_RESOURCE = "lexicon.json"


class Lexicon(BaseModel):
    """Immutable scoring vocabulary."""

    model_config = ConfigDict(frozen=True)

    positive_words: frozenset[str] = Field(..., description="Tokens scoring +1")
    negative_words: frozenset[str] = Field(..., description="Tokens scoring -1")
    emoji_scores: dict[str, float] = Field(
        default_factory=dict,
        description="Emoji -> score, added once per distinct emoji present",
    )
    stop_words: frozenset[str] = Field(default_factory=frozenset, description="Tokens ignored by theme extraction")
    pain_keywords: tuple[str, ...] = Field(
        default=(),
        description="Pain keywords in priority order; the first match per post wins",
    )

    @field_validator("positive_words", "negative_words", "stop_words", mode="before")
    @classmethod
    def _lowercase_words(cls, value):
        return frozenset(word.lower() for word in value)

    @field_validator("pain_keywords", mode="before")
    @classmethod
    def _lowercase_keywords(cls, value):
        return tuple(word.lower() for word in value)


def load_lexicon(path: str | Path | None = None) -> Lexicon:
    """Load a lexicon from a JSON file, or the packaged default.

    Args:
        path: Path to a lexicon JSON file (uses the bundled data if None)

    Returns:
        Validated Lexicon
    """
    if path is None:
        raw = resources.files("community_pulse.data").joinpath(DEFAULT_LEXICON_RESOURCE).read_text(encoding="utf-8")
        source = f"package:{DEFAULT_LEXICON_RESOURCE}"
    else:
        raw = Path(path).read_text(encoding="utf-8")
        source = str(path)

    lexicon = Lexicon.model_validate(json.loads(raw))
    logger.debug(
        "lexicon_loaded",
        source=source,
        positive=len(lexicon.positive_words),
        negative=len(lexicon.negative_words),
        emoji=len(lexicon.emoji_scores),
        pain_keywords=len(lexicon.pain_keywords),
    )
    return lexicon


@lru_cache(maxsize=None)
def get_lexicon(path: str | None = None) -> Lexicon:
    """Return the process-wide lexicon, loading it on first use."""
    return load_lexicon(path)
