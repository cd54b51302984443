"""Ordered provider fallback chain.

ReelScraper tries each adapter once, in order, and returns the first reel
produced. Individual failures are logged and counted; only exhausting the
whole chain is an error.
"""

import re
from typing import Sequence

import structlog

from reellens.collectors.base import BaseReelAdapter
from reellens.core.exceptions import AllProvidersFailedError, InvalidReelURLError
from reellens.models.schemas import ScrapedReel
from reellens.monitoring.metrics import track_scrape_attempt

logger = structlog.get_logger(__name__)

REEL_ID_PATTERN = re.compile(r"/reel/([A-Za-z0-9_-]+)")


def extract_reel_id(url: str) -> str:
    """Extract the reel shortcode from a URL, or "" if there is none."""
    match = REEL_ID_PATTERN.search(url)
    return match.group(1) if match else ""


class ReelScraper:
    """Scrape a reel through an ordered list of provider adapters.

    Each call to fetch_post restarts the chain from the first adapter; there
    are no per-adapter retries and no memory of earlier failures.

    Example:
        scraper = ReelScraper([apify_adapter, rapidapi_adapter, html_adapter])
        reel = await scraper.fetch_post("https://www.instagram.com/reel/abc123/")
    """

    def __init__(self, adapters: Sequence[BaseReelAdapter]):
        self.adapters = list(adapters)

    @property
    def provider_names(self) -> list[str]:
        return [adapter.name for adapter in self.adapters]

    async def fetch_post(self, url: str) -> ScrapedReel:
        """Scrape a reel, falling back through adapters in order.

        Args:
            url: Instagram reel URL.

        Returns:
            ScrapedReel from the first adapter that succeeds.

        Raises:
            InvalidReelURLError: If the URL has no reel shortcode.
            AllProvidersFailedError: If every adapter failed.
        """
        reel_id = extract_reel_id(url)
        if not reel_id:
            raise InvalidReelURLError(url)

        errors: dict[str, str] = {}

        for adapter in self.adapters:
            logger.info("scrape_attempt_started", provider=adapter.name, reel_id=reel_id)
            try:
                with track_scrape_attempt(adapter.name):
                    reel = await adapter.attempt(url)
            except Exception as e:
                errors[adapter.name] = str(e)
                logger.warning(
                    "scrape_attempt_failed",
                    provider=adapter.name,
                    reel_id=reel_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            logger.info("scrape_attempt_succeeded", provider=adapter.name, reel_id=reel_id)
            return reel

        logger.error("all_scrape_providers_failed", reel_id=reel_id, providers=list(errors))
        raise AllProvidersFailedError(url, errors)

    async def aclose(self) -> None:
        for adapter in self.adapters:
            await adapter.aclose()
