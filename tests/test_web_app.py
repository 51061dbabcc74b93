from unittest.mock import patch

from fastapi.testclient import TestClient

from community_pulse.errors import UpstreamAuthError
from community_pulse.report import FALLBACK_WARNING
from community_pulse.web_app import app

client = TestClient(app)


def test_healthz():
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_sentiment_degrades_on_upstream_failure():
    async def failing_fetch(request, settings):
        raise UpstreamAuthError("Reddit authentication failed. Please check your credentials.")

    with patch("community_pulse.pipeline.fetch_posts", failing_fetch):
        response = client.post("/api/sentiment", json={"idea": "dog walking", "timeWindow": "week"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalPosts"] == 0
    assert payload["filters"]["idea"] == "dog walking"
    assert payload["filters"]["timeWindow"] == "week"
    assert payload["warnings"][:2] == [
        FALLBACK_WARNING,
        "Reddit authentication failed. Please check your credentials.",
    ]
    assert [m["value"] for m in payload["metrics"]] == [0, 100, 0, 0, 0]


def test_sentiment_for_posts():
    posts = [
        {
            "id": f"p{i}",
            "title": "Scheduling is a problem for clinics",
            "body": "We need better tools. Love the idea!",
            "community": "healthcare",
            "score": 50,
            "num_comments": 2,
            "created_utc": 1700000000,
            "permalink": f"/r/healthcare/comments/p{i}/x/",
        }
        for i in range(20)
    ]
    response = client.post(
        "/api/sentiment/posts",
        json={"request": {"idea": "clinic scheduling"}, "posts": posts, "window_weeks": 4},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalPosts"] == 20
    assert payload["warnings"] == []
    assert payload["themes"][:2] == ["scheduling", "problem"]
    assert payload["pain_points"] == ["scheduling is a problem for clinics we need better tools"]
    assert len(payload["items"]) == 10
    assert {m["confidence"] for m in payload["metrics"]} == {0.7}


def _post(post_id, **overrides):
    post = {
        "id": post_id,
        "title": "Booking tool for groomers",
        "community": "smallbusiness",
        "score": 10,
        "num_comments": 1,
        "created_utc": 1700000000,
        "permalink": f"/r/smallbusiness/comments/{post_id}/x/",
    }
    post.update(overrides)
    return post


def test_sentiment_for_posts_skips_malformed_posts():
    posts = [_post(f"p{i}") for i in range(5)] + [{"title": "missing id"}, "not a post", _post("bad", score="lots")]
    response = client.post("/api/sentiment/posts", json={"posts": posts})

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalPosts"] == 5
    assert [item["title"] for item in payload["items"]] == ["Booking tool for groomers"] * 5


def test_sentiment_for_posts_millisecond_timestamp():
    response = client.post("/api/sentiment/posts", json={"posts": [_post("p1", created_utc=1_700_000_000_000)]})

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalPosts"] == 1
    assert payload["items"][0]["published"] == ""


def test_sentiment_for_posts_rejects_invalid_window():
    response = client.post("/api/sentiment/posts", json={"posts": [_post("p1")], "window_weeks": 0})
    assert response.status_code == 422
