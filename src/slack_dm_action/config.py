"""Application configuration via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Handler settings loaded from environment variables and .env file.

    These configure the handler process itself. Per-invocation secrets and
    environment arrive through the ExecutionContext instead.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Context environment keys holding the Slack API base URL, checked in order
    base_url_env_keys: list[str] = ["ADDRESS", "SLACK_API_URL"]

    # Error handler
    unknown_error_policy: Literal["retry", "raise"] = "retry"
    rate_limit_backoff_ms: int = 5000
    server_error_backoff_ms: int = 1000

    # App
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings. Lazy initialization to avoid import-time errors."""
    return Settings()
