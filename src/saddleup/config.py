"""
SaddleUp - Configuration and settings.

All settings load from the environment (or a local .env file).
The model endpoint is any OpenAI-compatible chat-completions API.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Text-generation API (OpenAI-compatible)
    llm_api_key: str
    llm_base_url: str = "https://api.perplexity.ai"
    llm_chat_model: str = "sonar-pro"
    llm_plan_model: str = "sonar-pro"

    # Upstream call limits - the SDK retries with exponential backoff
    llm_timeout_seconds: float = 60.0
    llm_max_retries: int = 2

    # Supabase (optional - record lookups fail fast when unset)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Application
    saddleup_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Prompt logging
    # SADDLEUP_LOG_PROMPTS=1 - log to local files (dev only)
    saddleup_log_prompts: bool = False

    # Dev user for the CLI
    dev_user_id: str = "00000000-0000-0000-0000-000000000002"

    @property
    def is_development(self) -> bool:
        return self.saddleup_env == "development"

    @property
    def is_production(self) -> bool:
        return self.saddleup_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
