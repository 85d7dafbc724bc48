"""Configuration and environment settings for the CardSense statement service."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for the CardSense statement service."""

    database_url: str = "sqlite:///cardsense.db"

    groq_api_key: str | None = None
    analysis_model: str = "llama-3.3-70b-versatile"
    analysis_fallback_model: str = "llama-3.1-8b-instant"
    analysis_temperature: float = 0.2
    analysis_max_chars: int = 10_000

    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    s3_bucket: str | None = None

    log_dir: str = "logs"
    log_level: str = "INFO"
    server_host: str = "127.0.0.1"
    server_port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> "Settings":
    """Return the cached application settings."""
    return Settings()
