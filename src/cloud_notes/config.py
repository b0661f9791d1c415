"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_anon_key: str
    notes_table: str = "notes"
    image_bucket: str = "images"
    image_content_type: str = "image/png"
    oauth_provider: str = "github"
    oauth_redirect_url: str | None = None
    load_notes_on_sign_in: bool = True
    provider_timeout_seconds: float | None = 30.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
