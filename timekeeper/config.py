"""Application configuration using pydantic-settings pattern."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Timekeeper"
    app_version: str = "0.1.0"
    app_env: str = Field(default="development")
    log_level: str = Field(default="INFO")
    port: int = Field(default=3000)
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Storage
    data_file: str = Field(
        default="backend/db.json",
        description="JSON file backing the meetings/templates/analytics store",
    )
    local_snapshot_file: str = Field(
        default=".timekeeper/local.json",
        description="Local fallback snapshot used when the backend is unreachable",
    )

    # Backend client
    api_base_url: str = Field(default="http://localhost:3000/api")
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Timer and scheduling
    tick_interval_seconds: float = Field(default=1.0, gt=0)
    default_snooze_seconds: int = Field(default=300, ge=1)
    default_meeting_duration: int = Field(default=30, ge=1)
    alert_check_interval_seconds: int = Field(default=60, ge=1)
    autosave_interval_seconds: int = Field(default=30, ge=1)
    disable_scheduler: bool = Field(
        default=False,
        description="Skip background jobs (used by tests)",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "TIMEKEEPER_",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
