"""Apify reel adapter.

Runs the Apify instagram-scraper actor against a single reel URL. This is
the highest-fidelity provider: it is the only one that exposes the owner's
follower, following and post counts.
"""

import asyncio

import structlog
from apify_client import ApifyClient

from reellens.collectors.base import BaseReelAdapter
from reellens.collectors.instagram.normalizer import transform_apify_reel
from reellens.collectors.registry import AdapterType, register_adapter
from reellens.core.exceptions import (
    CollectorError,
    CollectorNotFoundError,
    ConfigurationError,
)
from reellens.models.schemas import ScrapedReel

logger = structlog.get_logger(__name__)


@register_adapter(AdapterType.APIFY)
class ApifyReelAdapter(BaseReelAdapter):
    """Adapter for the Apify Instagram scraper actor.

    Example:
        adapter = ApifyReelAdapter(api_token="apify_api_...")
        reel = await adapter.attempt("https://www.instagram.com/reel/DFMgjRsS_Xw/")
    """

    name = "apify"

    DEFAULT_ACTOR = "apify/instagram-scraper"

    def __init__(
        self,
        api_token: str | None,
        actor_id: str = DEFAULT_ACTOR,
        timeout_seconds: float = 300.0,
        client: ApifyClient | None = None,
    ):
        """Initialize the Apify adapter.

        Args:
            api_token: Apify API token.
            actor_id: Actor to run for each reel.
            timeout_seconds: Max actor run time.
            client: Pre-built client (tests).

        Raises:
            ConfigurationError: If no API token is provided.
        """
        if client is None and not api_token:
            raise ConfigurationError("Apify API token required", config_key="APIFY_API_TOKEN")
        self.client = client or ApifyClient(api_token)
        self.actor_id = actor_id
        self.timeout_seconds = timeout_seconds
        logger.info("apify_adapter_initialized", actor_id=actor_id)

    def _run_actor_sync(self, run_input: dict) -> list[dict]:
        """Run the actor synchronously and return its dataset items.

        Note: Apify client is synchronous; we wrap for async interface.
        """
        run = self.client.actor(self.actor_id).call(
            run_input=run_input,
            timeout_secs=int(self.timeout_seconds),
        )
        if not run:
            raise CollectorError(self.name, "Actor run did not return a run object")
        return list(self.client.dataset(run["defaultDatasetId"]).iterate_items())

    async def attempt(self, url: str) -> ScrapedReel:
        """Scrape one reel through the Apify actor.

        Raises:
            CollectorNotFoundError: If the actor returned no items.
            CollectorError: For any other failure.
        """
        run_input = {
            "directUrls": [url],
            "resultsType": "posts",
            "resultsLimit": 1,
            "addParentData": True,
        }

        logger.info("apify_scrape_started", url=url)

        # Run in thread pool since Apify client is synchronous
        loop = asyncio.get_running_loop()
        try:
            items = await loop.run_in_executor(None, self._run_actor_sync, run_input)
        except CollectorError:
            raise
        except Exception as e:
            raise CollectorError(
                self.name,
                f"Actor run failed: {e}",
                {"url": url, "error_type": type(e).__name__},
            ) from e

        if not items:
            raise CollectorNotFoundError(self.name, "No reel data returned", {"url": url})

        return transform_apify_reel(items[0])

    async def health_check(self) -> bool:
        return self.client is not None
