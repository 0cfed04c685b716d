"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "face-images"
    facepp_api_key: str
    facepp_api_secret: str
    facepp_base_url: str = "https://api-us.faceplusplus.com/facepp/v3"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    turnstile_secret_key: str | None = None
    turnstile_site_key: str = ""
    admin_username: str | None = None
    admin_password: str | None = None
    github_client_id: str | None = None
    github_client_secret: str | None = None
    github_allowed_users: str | None = None
    retention_months: int = 6
    session_ttl_seconds: int = 7 * 24 * 60 * 60
    upstream_timeout_seconds: float = 15.0
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_allowed_users(raw: str | None) -> set[str]:
    """Parse the GitHub login allow-list from env.

    An empty or missing value allows nobody.
    """
    if raw is None:
        return set()
    return {chunk.strip() for chunk in raw.split(",") if chunk.strip()}
