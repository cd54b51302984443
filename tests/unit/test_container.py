"""Unit tests for the dependency container."""

import pytest

from reellens.config.settings import Settings
from reellens.core.container import DependencyContainer
from reellens.core.exceptions import InitializationError
from reellens.storage.memory import InMemoryReelStore


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("APIFY_API_TOKEN", "RAPIDAPI_KEY", "ANTHROPIC_API_KEY", "STORAGE_BACKEND", "SUPABASE_URL", "SUPABASE_KEY"):
        monkeypatch.delenv(name, raising=False)


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestScraperChain:
    def test_unconfigured_providers_skipped(self):
        container = DependencyContainer(_settings())

        assert container.scraper.provider_names == ["html"]

    def test_full_chain_in_order(self):
        container = DependencyContainer(_settings(apify_api_token="apify-test", rapidapi_key="rapid-test"))

        assert container.scraper.provider_names == ["apify", "rapidapi", "html"]


class TestServices:
    def test_missing_anthropic_key(self):
        container = DependencyContainer(_settings())

        with pytest.raises(InitializationError):
            _ = container.analyzer

    def test_memory_store_default(self):
        container = DependencyContainer(_settings())

        assert isinstance(container.store, InMemoryReelStore)
        assert container.store is container.store

    def test_supabase_without_credentials(self):
        container = DependencyContainer(_settings(storage_backend="supabase"))

        with pytest.raises(InitializationError):
            _ = container.store

    def test_component_status(self):
        container = DependencyContainer(_settings(anthropic_api_key="sk-test"))

        assert container.component_status() == {
            "apify": False,
            "rapidapi": False,
            "anthropic": True,
            "supabase": False,
        }


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_initialize_and_shutdown(self):
        container = DependencyContainer(_settings(anthropic_api_key="sk-test"))

        await container.initialize()
        assert container.is_initialized
        assert container.reconciler.store is container.store

        await container.shutdown()
        assert not container.is_initialized

    @pytest.mark.asyncio
    async def test_initialize_surfaces_config_errors(self):
        container = DependencyContainer(_settings())

        with pytest.raises(InitializationError):
            await container.initialize()
        assert not container.is_initialized
