"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
from pathlib import Path
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings – values come from .env or environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    generation_temperature: float = 0.7

    # Generation limits
    default_max_output_tokens: int = 400
    word_limit_token_multiplier: int = 3
    # room for the JSON envelope on very short word limits
    min_output_tokens: int = 64

    # Supabase (auth + history table)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    history_table: str = "History"
    auth_providers: list[str] = ["google", "github"]
    site_url: str = "http://localhost:8000"
    session_cookie_name: str = "typewise_session"
    pkce_cookie_name: str = "typewise_pkce"
    pkce_cookie_max_age: int = 600
    # Signed-in user assumed when Supabase is not configured (local development)
    dev_user_id: str = ""

    # App
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    # Paths
    log_dir: str = "logs"
    data_dir: str = "data"

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


@lru_cache
def get_settings() -> Settings:
    """Return cached singleton settings instance."""
    return Settings()


def setup_logging() -> None:
    """Configure root logger based on settings."""
    settings = get_settings()
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
