"""FastAPI application serving sentiment reports to the dashboard."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from . import __version__
from .config import get_settings
from .lexicon import get_lexicon
from .models import AnalysisRequest
from .pipeline import analyze_topic, run_analysis, validate_posts

app = FastAPI(title="Community Pulse", version=__version__)
settings = get_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


class PostsAnalysisBody(BaseModel):
    """Request body for scoring caller-supplied posts."""

    request: AnalysisRequest = Field(default_factory=AnalysisRequest)
    # Validated per post so one malformed entry does not reject the batch
    posts: list[Any] = Field(default_factory=list)
    window_weeks: float = Field(default=4.0, gt=0)


@app.get("/healthz")
async def healthz():
    return {"status": "ok", "version": __version__}


@app.post("/api/sentiment")
async def sentiment(request: AnalysisRequest):
    """Fetch Reddit posts for the request and return the report.

    Always answers 200; upstream failures come back as a degraded report.
    """
    report = await analyze_topic(request, settings=settings)
    return report.to_json_dict()


@app.post("/api/sentiment/posts")
async def sentiment_for_posts(body: PostsAnalysisBody):
    """Score posts supplied in the request body without fetching."""
    report = await run_analysis(
        validate_posts(body.posts),
        body.request,
        window_weeks=body.window_weeks,
        lexicon=get_lexicon(settings.lexicon_path),
        max_concurrency=settings.max_concurrency,
    )
    return report.to_json_dict()
