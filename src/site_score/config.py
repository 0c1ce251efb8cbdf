"""Runtime settings loaded from the environment."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Audit settings.

    Values come from environment variables (case-insensitive) or a local
    ``.env`` file, e.g. ``PAGESPEED_API_KEY=...``.
    """

    # Without a key PageSpeed still answers, with a much lower quota
    pagespeed_api_key: Optional[str] = None
    pagespeed_endpoint: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

    # Seconds
    pagespeed_timeout: float = 45.0
    fetch_timeout: float = 12.0
    audit_timeout: float = 60.0

    # Bodies of the page, robots.txt and sitemap.xml are cut off past this
    max_page_bytes: int = 2_000_000

    user_agent: str = "Mozilla/5.0 (compatible; SiteScoreBot/1.0)"

    # Recommendations shown in full vs. teased behind the paid report
    recommendations_display_limit: int = 8
    free_recommendations: int = 3

    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
