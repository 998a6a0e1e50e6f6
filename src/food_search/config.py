"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    calorieninjas_api_key: str
    calorieninjas_base_url: str = "https://api.calorieninjas.com/v1"
    openfoodfacts_user_agent: str = "FoodSearch/1.0 (food diary search)"
    default_country: str = "GB"
    cors_allow_origins: list[str] = ["*"]
    source_timeout_seconds: float = 8.0
    branded_fallback_threshold: int = 5
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_country(raw: str | None, default: str = "GB") -> str:
    """Normalize a country code, falling back to the default."""
    if raw is None:
        return default.upper()
    cleaned = raw.strip().upper()
    return cleaned or default.upper()
