"""
KitchenFlow - Configuration and settings.

Everything is read from the environment (or a local .env file).
Secrets are optional so the parsing pipeline and the CLI work offline;
the clients that need them fail loudly when they are missing.
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

    # OpenAI (text structuring + ingredient matching)
    openai_api_key: str | None = None
    llm_model: str = "gpt-4.1-mini"
    llm_temperature: float = 0.2

    # Supabase (recipe persistence)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_service_role_key: str | None = None

    # Application
    kitchenflow_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Web page import
    fetch_timeout_seconds: float = 15.0
    fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    )
    # Upper bound on page text handed to the text-structuring capability
    html_text_max_chars: int = 10000

    # Paprika archive import
    archive_entry_suffix: str = ".paprikarecipe"

    @property
    def is_development(self) -> bool:
        return self.kitchenflow_env == "development"

    @property
    def is_production(self) -> bool:
        return self.kitchenflow_env == "production"


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
