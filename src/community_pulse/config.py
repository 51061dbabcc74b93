"""Configuration management using pydantic-settings."""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Lookback length in weeks for each Reddit time-window label.
WINDOW_WEEKS: dict[str, float] = {
    "hour": 1 / 168,
    "day": 1 / 7,
    "week": 1.0,
    "month": 4.0,
    "year": 52.0,
    "all": 52.0,
}

DEFAULT_WINDOW_WEEKS = 4.0


def window_weeks_for(time_window: str | None) -> float:
    """Map a time-window label to a window length in weeks.

    Unknown or missing labels fall back to a four-week month.
    """
    if not time_window:
        return DEFAULT_WINDOW_WEEKS
    return WINDOW_WEEKS.get(time_window.lower(), DEFAULT_WINDOW_WEEKS)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="COMMUNITY_PULSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Reddit OAuth (client-credentials grant)
    reddit_client_id: str = Field(
        default="",
        validation_alias=AliasChoices("REDDIT_CLIENT_ID", "COMMUNITY_PULSE_REDDIT_CLIENT_ID"),
        description="Reddit app client ID (accepts REDDIT_CLIENT_ID or COMMUNITY_PULSE_REDDIT_CLIENT_ID)",
    )
    reddit_client_secret: str = Field(
        default="",
        validation_alias=AliasChoices("REDDIT_CLIENT_SECRET", "COMMUNITY_PULSE_REDDIT_CLIENT_SECRET"),
        description="Reddit app client secret",
    )
    user_agent: str = Field(
        default="community-pulse/1.0",
        description="User agent string for Reddit API requests",
    )

    # Search parameters
    search_limit: int = Field(
        default=50,
        ge=1,
        le=100,
        description="Maximum posts requested from Reddit search",
    )
    default_time_window: str = Field(
        default="month",
        description="Default Reddit search window: hour, day, week, month, year, all",
    )
    selftext_max_chars: int = Field(
        default=500,
        ge=0,
        description="Post bodies are truncated to this many characters on ingestion",
    )

    # Request handling
    fetch_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Deadline for the upstream post fetch",
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=50,
        description="Maximum concurrent per-post classifications",
    )

    # Lexicon override
    lexicon_path: str | None = Field(
        default=None,
        description="Path to an alternate lexicon JSON file",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR",
    )
    log_json: bool = Field(
        default=False,
        description="Output logs as JSON (for production)",
    )

    @property
    def has_reddit_credentials(self) -> bool:
        """Check whether Reddit OAuth credentials are configured."""
        return bool(self.reddit_client_id and self.reddit_client_secret)


def get_settings() -> Settings:
    """Load and return application settings."""
    return Settings()
