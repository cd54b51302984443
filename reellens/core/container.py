"""
Dependency Injection Container for ReelLens.

Builds the scraper, analyzer, store and reconciler from Settings with lazy
initialization and owns their lifecycle.

Usage:
    # At application startup
    container = DependencyContainer()
    await container.initialize()

    record = await container.reconciler.reconcile(url)

    # At shutdown
    await container.shutdown()
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any

import structlog

from reellens.config.settings import Settings, get_settings
from reellens.core.exceptions import InitializationError

if TYPE_CHECKING:
    from reellens.analysis.sentiment import ReelAnalyzer
    from reellens.collectors.registry import AdapterType
    from reellens.collectors.scraper import ReelScraper
    from reellens.services.reconciler import ReelReconciler
    from reellens.storage.base import ReelStore

logger = structlog.get_logger(__name__)


def _secret(value) -> str | None:
    return value.get_secret_value() if value is not None else None


class DependencyContainer:
    """
    Central container for all service dependencies.

    Services are created on first access and cached. A scraping provider
    whose credential is missing is left out of the fallback chain; the page
    scrape needs no credential and is always present.

    Example:
        container = DependencyContainer(settings)
        scraper = container.scraper
        print(scraper.provider_names)  # ['apify', 'rapidapi', 'html']
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the container.

        Args:
            settings: Application settings. Defaults to get_settings().
        """
        self._settings = settings or get_settings()
        self._scraper: ReelScraper | None = None
        self._analyzer: ReelAnalyzer | None = None
        self._store: ReelStore | None = None
        self._reconciler: ReelReconciler | None = None
        self._initialized = False

        logger.info("dependency_container_created")

    @property
    def settings(self) -> Settings:
        """Get application settings."""
        return self._settings

    def _adapter_kwargs(self, adapter_type: "AdapterType") -> dict[str, Any] | None:
        """Constructor arguments for a provider, or None if it is not configured."""
        from reellens.collectors.registry import AdapterType

        s = self._settings
        if adapter_type is AdapterType.APIFY:
            if s.apify_api_token is None:
                return None
            return {
                "api_token": _secret(s.apify_api_token),
                "actor_id": s.apify_actor_id,
                "timeout_seconds": s.scraper_timeout_seconds,
            }
        if adapter_type is AdapterType.RAPIDAPI:
            if s.rapidapi_key is None:
                return None
            return {
                "api_key": _secret(s.rapidapi_key),
                "host": s.rapidapi_host,
                "timeout_seconds": s.scraper_timeout_seconds,
            }
        return {"timeout_seconds": s.scraper_timeout_seconds}

    @property
    def scraper(self) -> "ReelScraper":
        """
        Get the provider fallback chain (lazy initialization).

        Raises:
            InitializationError: If an adapter cannot be created.
        """
        if self._scraper is None:
            from reellens.collectors.registry import DEFAULT_ADAPTER_ORDER, get_adapter
            from reellens.collectors.scraper import ReelScraper

            adapters = []
            for adapter_type in DEFAULT_ADAPTER_ORDER:
                kwargs = self._adapter_kwargs(adapter_type)
                if kwargs is None:
                    logger.info("scrape_provider_skipped", provider=adapter_type.value, reason="not_configured")
                    continue
                try:
                    adapters.append(get_adapter(adapter_type, **kwargs))
                except Exception as e:
                    logger.error("scrape_provider_creation_failed", provider=adapter_type.value, error=str(e))
                    raise InitializationError(
                        "ReelScraper",
                        f"Failed to create {adapter_type.value} adapter: {e}",
                    ) from e

            self._scraper = ReelScraper(adapters)
            logger.info("reel_scraper_created", providers=self._scraper.provider_names)
        return self._scraper

    @property
    def analyzer(self) -> "ReelAnalyzer":
        """
        Get the analysis gateway (lazy initialization).

        Raises:
            InitializationError: If the Anthropic key is missing.
        """
        if self._analyzer is None:
            try:
                from reellens.analysis.sentiment import ReelAnalyzer

                self._analyzer = ReelAnalyzer(
                    api_key=_secret(self._settings.anthropic_api_key),
                    model=self._settings.anthropic_model,
                    max_tokens=self._settings.anthropic_max_tokens,
                )
                logger.info("reel_analyzer_created", model=self._settings.anthropic_model)
            except Exception as e:
                logger.error("reel_analyzer_creation_failed", error=str(e))
                raise InitializationError(
                    "ReelAnalyzer",
                    f"Failed to create analyzer: {e}",
                    {"model": self._settings.anthropic_model},
                ) from e
        return self._analyzer

    @property
    def store(self) -> "ReelStore":
        """
        Get the record store (lazy initialization).

        Raises:
            InitializationError: If the configured backend cannot be created.
        """
        if self._store is None:
            backend = self._settings.storage_backend
            try:
                if backend == "supabase":
                    from reellens.storage.supabase_store import SupabaseReelStore

                    self._store = SupabaseReelStore(
                        url=self._settings.supabase_url,
                        key=_secret(self._settings.supabase_key),
                        table=self._settings.reels_table,
                    )
                else:
                    from reellens.storage.memory import InMemoryReelStore

                    self._store = InMemoryReelStore()
                logger.info("reel_store_created", backend=backend)
            except Exception as e:
                logger.error("reel_store_creation_failed", backend=backend, error=str(e))
                raise InitializationError(
                    "ReelStore",
                    f"Failed to create {backend} store: {e}",
                    {"backend": backend},
                ) from e
        return self._store

    @property
    def reconciler(self) -> "ReelReconciler":
        """Get the record reconciler (lazy initialization)."""
        if self._reconciler is None:
            from reellens.services.reconciler import ReelReconciler

            self._reconciler = ReelReconciler(
                scraper=self.scraper,
                analyzer=self.analyzer,
                store=self.store,
                cache_ttl=timedelta(seconds=self._settings.cache_ttl_seconds),
            )
        return self._reconciler

    def component_status(self) -> dict[str, bool]:
        """Which external components have credentials configured."""
        s = self._settings
        return {
            "apify": s.apify_api_token is not None,
            "rapidapi": s.rapidapi_key is not None,
            "anthropic": s.anthropic_api_key is not None,
            "supabase": s.storage_backend == "supabase"
            and bool(s.supabase_url)
            and s.supabase_key is not None,
        }

    async def initialize(self) -> None:
        """
        Build all services eagerly so configuration errors surface at startup.

        Raises:
            InitializationError: If any service fails to initialize.
        """
        if self._initialized:
            logger.warning("container_already_initialized")
            return

        logger.info("container_initializing")
        _ = self.reconciler
        self._initialized = True
        logger.info("container_initialized")

    async def shutdown(self) -> None:
        """Close network clients held by the services."""
        logger.info("container_shutting_down")

        if self._scraper is not None:
            try:
                await self._scraper.aclose()
            except Exception as e:
                logger.error("scraper_close_error", error=str(e))

        if self._store is not None:
            try:
                await self._store.aclose()
            except Exception as e:
                logger.error("store_close_error", error=str(e))

        self._initialized = False
        logger.info("container_shutdown_complete")

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized


_container: DependencyContainer | None = None


def get_container() -> DependencyContainer:
    """
    Get the global container instance.

    Creates one if it doesn't exist.
    """
    global _container
    if _container is None:
        _container = DependencyContainer()
    return _container


def set_container(container: DependencyContainer | None) -> None:
    """Replace the global container (tests)."""
    global _container
    _container = container


async def shutdown_container() -> None:
    """Shutdown the global container."""
    global _container
    if _container is not None:
        await _container.shutdown()
        _container = None
