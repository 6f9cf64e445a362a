"""Environment-driven configuration helpers for the betting league client."""

from __future__ import annotations

from functools import lru_cache

from pydantic import AnyUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env files."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    database_url: AnyUrl | str = Field(default="sqlite:///./betleague.db")

    league_api_base_url: str = Field(
        default="http://localhost:8001", validation_alias="LEAGUE_API_BASE_URL"
    )
    league_api_token: str = Field(default="", validation_alias="LEAGUE_API_TOKEN")
    request_timeout: float = Field(default=30.0, gt=0.0)

    weekly_budget: float = Field(default=100.0, gt=0.0)
    default_stake: float = Field(default=10.0, ge=0.0)
    min_parlay_legs: int = Field(default=2, ge=1)
    max_parlay_legs: int = Field(default=10, ge=2, le=25)

    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()  # type: ignore[call-arg]

