"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Facility Pricing Engine"
    debug: bool = True
    mock_mode: bool = True  # When True, repositories are in-memory

    # ── MongoDB ──────────────────────────────────────────
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "facility_pricing"

    # ── Pricing defaults ─────────────────────────────────
    default_service_frequency: str = "5x_week"
    default_task_complexity: str = "standard"
    comparison_frequencies: list[str] = Field(
        default_factory=lambda: ["1x_week", "2x_week", "3x_week", "5x_week"]
    )

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
