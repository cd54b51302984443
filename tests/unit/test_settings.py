"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from reellens.config.settings import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("APP_ENV", "DEBUG", "STORAGE_BACKEND", "CORS_ALLOWED_ORIGINS", "CACHE_TTL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    def test_development_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.is_development
        assert settings.storage_backend == "memory"
        assert settings.cache_ttl_seconds == 3600
        assert settings.apify_api_token is None

    def test_secrets_are_masked(self):
        settings = Settings(_env_file=None, anthropic_api_key="sk-secret")

        assert "sk-secret" not in repr(settings)
        assert settings.anthropic_api_key.get_secret_value() == "sk-secret"

    def test_loaded_from_environment(self, monkeypatch):
        monkeypatch.setenv("CACHE_TTL_SECONDS", "60")

        assert Settings(_env_file=None).cache_ttl_seconds == 60


class TestProductionValidation:
    """Test production-only safety checks."""

    def test_unsafe_production_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None, app_env="production", cors_allowed_origins=["*"])

        message = str(exc_info.value)
        assert "debug must be False" in message
        assert "cors_allowed_origins" in message
        assert "storage_backend" in message

    def test_safe_production_accepted(self):
        settings = Settings(
            _env_file=None,
            app_env="production",
            debug=False,
            storage_backend="supabase",
            cors_allowed_origins=["https://reellens.example"],
        )

        assert settings.is_production


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_reloads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("CACHE_TTL_SECONDS", "5")
        get_settings.cache_clear()

        assert get_settings() is not first
        assert get_settings().cache_ttl_seconds == 5
