"""
Application Settings.

Centralized configuration using Pydantic Settings with environment variable loading.
Credentials are optional at load time; each component that needs one validates
it when it is constructed, so a missing scraping key only removes that provider
from the fallback chain while a missing model key fails fast.

Production Mode:
    When app_env="production", additional validations apply:
    - debug must be False
    - cors_allowed_origins cannot be ["*"]
    - storage_backend must be "supabase"
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Apify (primary scraper)
    # -------------------------------------------------------------------------
    apify_api_token: SecretStr | None = Field(
        default=None, description="Apify API token for the Instagram scraper actor"
    )
    apify_actor_id: str = Field(
        default="apify/instagram-scraper",
        description="Apify actor used to scrape a single reel",
    )

    # -------------------------------------------------------------------------
    # RapidAPI (secondary scraper)
    # -------------------------------------------------------------------------
    rapidapi_key: SecretStr | None = Field(
        default=None, description="RapidAPI key for the Instagram scraper API"
    )
    rapidapi_host: str = Field(
        default="instagram-scraper-api2.p.rapidapi.com",
        description="RapidAPI host serving the post_info endpoint",
    )

    scraper_timeout_seconds: float = Field(
        default=300.0,
        description="HTTP timeout for a single scraping provider call",
    )

    # -------------------------------------------------------------------------
    # Anthropic (Claude LLM)
    # -------------------------------------------------------------------------
    anthropic_api_key: SecretStr | None = Field(
        default=None, description="Anthropic API key for reel analysis"
    )
    anthropic_model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model used for the batched sentiment/insights call",
    )
    anthropic_max_tokens: int = Field(
        default=4096,
        ge=256,
        description="Max output tokens for the analysis call",
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    storage_backend: Literal["memory", "supabase"] = Field(
        default="memory",
        description="Where reel records are persisted",
    )
    supabase_url: str | None = Field(default=None, description="Supabase project URL")
    supabase_key: SecretStr | None = Field(
        default=None, description="Supabase anon or service key"
    )
    reels_table: str = Field(default="reels", description="Table holding reel records")

    cache_ttl_seconds: int = Field(
        default=3600,
        ge=0,
        description="How long a stored record is served without re-scraping",
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode (exposes error details in 500 responses)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines",
    )

    # -------------------------------------------------------------------------
    # CORS Settings
    # -------------------------------------------------------------------------
    cors_allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins. Use ['*'] for development only.",
    )
    cors_allow_credentials: bool = Field(
        default=True,
        description="Allow credentials in CORS requests",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production settings are safe."""
        if self.app_env == "production":
            errors = []

            if self.debug:
                errors.append("debug must be False in production")

            if "*" in self.cors_allowed_origins:
                errors.append("cors_allowed_origins cannot contain '*' in production")

            if self.storage_backend != "supabase":
                errors.append("storage_backend must be 'supabase' in production")

            if errors:
                raise ValueError(
                    f"Production configuration errors: {'; '.join(errors)}"
                )

        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()
