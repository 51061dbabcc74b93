import pytest
import structlog

from community_pulse.lexicon import Lexicon, get_lexicon
from community_pulse.models import AnalysisRequest, RawPost


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any configure_logging call so logger setup cannot leak between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def lexicon() -> Lexicon:
    """The bundled lexicon."""
    return get_lexicon()


@pytest.fixture
def tiny_lexicon() -> Lexicon:
    """A small injected lexicon for isolating the algorithms from the data."""
    return Lexicon(
        positive_words=["good"],
        negative_words=["bad"],
        emoji_scores={"🙂": 1, "☹": -2},
        stop_words=["with"],
        pain_keywords=["broken", "need"],
    )


@pytest.fixture
def request_model() -> AnalysisRequest:
    return AnalysisRequest(idea="meal planning app", industry="food", time_window="month")


@pytest.fixture
def make_post():
    """Factory for RawPost objects with sensible defaults."""
    counter = {"n": 0}

    def _make(title: str = "A post", body: str = "", score: int = 0, num_comments: int = 0, **kwargs) -> RawPost:
        counter["n"] += 1
        n = counter["n"]
        return RawPost(
            id=kwargs.pop("id", f"p{n}"),
            title=title,
            body=body,
            community=kwargs.pop("community", "startups"),
            score=score,
            num_comments=num_comments,
            created_utc=kwargs.pop("created_utc", 1_700_000_000 + n),
            permalink=kwargs.pop("permalink", f"/r/startups/comments/p{n}/a_post/"),
            **kwargs,
        )

    return _make


@pytest.fixture
def listing_child():
    """Factory for Reddit search listing children."""

    def _child(post_id: str = "abc123", **overrides) -> dict:
        data = {
            "id": post_id,
            "title": "Looking for a better meal planner",
            "selftext": "Every app I tried is broken.",
            "subreddit": "startups",
            "score": 12,
            "num_comments": 4,
            "created_utc": 1700000000.0,
            "permalink": f"/r/startups/comments/{post_id}/looking/",
            "over_18": False,
        }
        data.update(overrides)
        return {"kind": "t3", "data": data}

    return _child
