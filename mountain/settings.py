from datetime import date

from pydantic import Field
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

DEFAULT_SEASON_PALETTES: dict[str, list[str]] = {
    "spring": ["#1b2a1f", "#2f6b3a", "#6fbf73", "#f4b6c2", "#fff0f5"],
    "summer": ["#0e2a1a", "#1e6b34", "#39d353", "#b6f09c", "#fffbe6"],
    "autumn": ["#2b1a0e", "#7a3b12", "#d2691e", "#f4a261", "#fff1d6"],
    "winter": ["#141b26", "#2e4a6b", "#6d9dc5", "#c9e4f5", "#ffffff"],
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    `SEASON_PALETTES` is read as JSON.
    """

    github_graphql_url: str = "https://api.github.com/graphql"
    github_token: str | None = None
    github_user: str | None = None
    period_mode: str = "past_year"
    period_last_n_days: int = 30
    period_from: date | None = None
    period_to: date | None = None
    scale_mode: str = "linear"
    canvas_width: int = Field(default=800, gt=0)
    canvas_height: int = Field(default=400, gt=0)
    max_height_units: float = Field(default=20.0, ge=0)
    season_palettes: dict[str, list[str]] = Field(
        default_factory=lambda: {
            season: list(stops) for season, stops in DEFAULT_SEASON_PALETTES.items()
        }
    )
    output_path: str = "mountain.svg"
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
