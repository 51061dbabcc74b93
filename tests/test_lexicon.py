import json

import pytest
from pydantic import ValidationError

from community_pulse.lexicon import Lexicon, get_lexicon, load_lexicon


def test_bundled_lexicon_loads():
    lexicon = load_lexicon()
    assert "love" in lexicon.positive_words
    assert "scam" in lexicon.negative_words
    assert lexicon.emoji_scores["😡"] == -2
    assert "which" in lexicon.stop_words


def test_pain_keywords_keep_priority_order():
    lexicon = load_lexicon()
    assert lexicon.pain_keywords[:5] == ("problem", "issue", "difficult", "hard", "frustrating")
    assert lexicon.pain_keywords[-1] == "wish"


def test_get_lexicon_is_cached():
    assert get_lexicon() is get_lexicon()


def test_load_lexicon_from_file(tmp_path):
    path = tmp_path / "lexicon.json"
    path.write_text(
        json.dumps(
            {
                "positive_words": ["Stellar"],
                "negative_words": ["Meh"],
                "emoji_scores": {"✨": 1.5},
                "stop_words": [],
                "pain_keywords": ["Blocker", "slow"],
            }
        ),
        encoding="utf-8",
    )
    lexicon = load_lexicon(path)
    assert lexicon.positive_words == frozenset({"stellar"})
    assert lexicon.negative_words == frozenset({"meh"})
    assert lexicon.pain_keywords == ("blocker", "slow")
    assert lexicon.emoji_scores == {"✨": 1.5}


def test_lexicon_is_immutable():
    lexicon = Lexicon(positive_words=["good"], negative_words=["bad"])
    with pytest.raises(ValidationError):
        lexicon.positive_words = frozenset({"great"})
