"""Generic page-scrape adapter.

Fetches the public reel page and reads the ``window._sharedData`` blob
embedded in one of its script tags. This is the lowest-fidelity provider and
the last one in the chain; it needs no credentials.
"""

import json
import re
from typing import Optional

import httpx
import structlog
from bs4 import BeautifulSoup

from reellens.collectors.base import BaseReelAdapter
from reellens.collectors.instagram.normalizer import transform_shared_data
from reellens.collectors.registry import AdapterType, register_adapter
from reellens.core.exceptions import CollectorError, CollectorTimeoutError
from reellens.models.schemas import ScrapedReel

logger = structlog.get_logger(__name__)

SHARED_DATA_PATTERN = re.compile(r"window\._sharedData\s*=\s*(\{.*?\});", re.DOTALL)

USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


def extract_shared_data(html: str) -> dict | None:
    """Find and parse ``window._sharedData`` in a page.

    Args:
        html: Raw page HTML.

    Returns:
        The parsed object, or None if no script tag carries it.
    """
    soup = BeautifulSoup(html, "html.parser")
    for script in soup.find_all("script"):
        content = script.string or script.get_text()
        if not content or "window._sharedData" not in content:
            continue
        match = SHARED_DATA_PATTERN.search(content)
        if not match:
            continue
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            # Keep scanning remaining script tags
            continue
    return None


@register_adapter(AdapterType.HTML)
class HTMLReelAdapter(BaseReelAdapter):
    """Adapter that scrapes the public reel page directly."""

    name = "html"

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._timeout = timeout_seconds
        self._client = client

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def attempt(self, url: str) -> ScrapedReel:
        logger.info("html_scrape_started", url=url)
        client = await self._ensure_client()

        try:
            response = await client.get(url)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise CollectorTimeoutError(self.name, f"Request timeout: {e}", {"url": url}) from e
        except httpx.HTTPError as e:
            raise CollectorError(self.name, f"Page fetch failed: {e}", {"url": url}) from e

        shared = extract_shared_data(response.text)
        if shared is None:
            raise CollectorError(self.name, "Could not extract Instagram data", {"url": url})

        return transform_shared_data(shared)

    async def health_check(self) -> bool:
        return True
