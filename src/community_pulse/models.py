"""Pydantic models for posts, classifications and the aggregate report."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SentimentLabel(str, Enum):
    """Discrete sentiment class assigned to a post."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class RawPost(BaseModel):
    """A social post as supplied by the ingestion collaborator."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    body: str = ""
    community: str = Field(..., description="Source community label (subreddit name, without r/)")
    score: int = Field(default=0, description="Upvote-like popularity score")
    num_comments: int = Field(default=0, ge=0)
    created_utc: int = Field(default=0, description="Creation time, epoch seconds")
    permalink: str = ""

    @property
    def text(self) -> str:
        """Title and body joined the way every text scorer reads them."""
        return f"{self.title} {self.body}"


class SentimentResult(BaseModel):
    """Output of the sentiment classifier for one text."""

    model_config = ConfigDict(frozen=True)

    label: SentimentLabel
    score: float


class ClassifiedPost(BaseModel):
    """A RawPost together with its sentiment classification."""

    model_config = ConfigDict(frozen=True)

    post: RawPost
    label: SentimentLabel
    sentiment_score: float


class Metric(BaseModel):
    """A single named figure in the report."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: int | float
    unit: str
    explanation: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class ReportItem(BaseModel):
    """A post rendered for the report's item list."""

    model_config = ConfigDict(frozen=True)

    title: str
    snippet: str
    url: str
    published: str = Field(..., description="ISO-8601 publish time")
    source: str = Field(..., description="Community label, e.g. r/startups")
    evidence: tuple[str, ...] = ()
    score: int = 0
    num_comments: int = 0


class Citation(BaseModel):
    """A labelled link backing the report."""

    model_config = ConfigDict(frozen=True)

    label: str
    url: str


class AnalysisRequest(BaseModel):
    """Inbound request describing what to search for."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    idea: str = Field(default="", description="Topic or startup idea to search for")
    industry: str | None = None
    geography: str | None = None
    time_window: str | None = Field(
        default=None,
        validation_alias=AliasChoices("time_window", "timeWindow"),
        serialization_alias="timeWindow",
        description="Reddit search window label: hour, day, week, month, year, all",
    )


class AggregateReport(BaseModel):
    """Terminal artifact of one analysis. Built once, never mutated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    generated_at: datetime = Field(..., serialization_alias="updatedAt")
    filters: AnalysisRequest
    metrics: tuple[Metric, ...]
    themes: tuple[str, ...] = Field(default=(), max_length=6)
    pain_points: tuple[str, ...] = Field(default=(), max_length=6)
    items: tuple[ReportItem, ...] = ()
    citations: tuple[Citation, ...] = ()
    warnings: tuple[str, ...] = ()
    total_posts: int = Field(..., ge=0, serialization_alias="totalPosts")

    def metric(self, name: str) -> Metric:
        """Look up a metric by name.

        Raises:
            KeyError: If the report has no metric with that name
        """
        for metric in self.metrics:
            if metric.name == name:
                return metric
        raise KeyError(name)

    def to_json_dict(self) -> dict:
        """Serialize using the wire field names consumed by the dashboard."""
        return self.model_dump(mode="json", by_alias=True)
