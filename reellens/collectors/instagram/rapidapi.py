"""RapidAPI reel adapter.

Calls the instagram-scraper-api2 ``post_info`` endpoint. The payload is the
GraphQL-style media object; owner follower counts are present but post
counts are not.
"""

from typing import Any, Optional

import httpx
import structlog

from reellens.collectors.base import BaseReelAdapter
from reellens.collectors.instagram.normalizer import transform_rapidapi_reel
from reellens.collectors.registry import AdapterType, register_adapter
from reellens.core.exceptions import (
    CollectorAuthError,
    CollectorError,
    CollectorNotFoundError,
    CollectorRateLimitError,
    CollectorTimeoutError,
    ConfigurationError,
)
from reellens.models.schemas import ScrapedReel

logger = structlog.get_logger(__name__)


@register_adapter(AdapterType.RAPIDAPI)
class RapidAPIReelAdapter(BaseReelAdapter):
    """Adapter for the RapidAPI Instagram scraper.

    Example:
        async with RapidAPIReelAdapter(api_key="...") as adapter:
            reel = await adapter.attempt(url)
    """

    name = "rapidapi"

    DEFAULT_HOST = "instagram-scraper-api2.p.rapidapi.com"

    def __init__(
        self,
        api_key: str | None,
        host: str = DEFAULT_HOST,
        timeout_seconds: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the adapter.

        Args:
            api_key: RapidAPI key.
            host: RapidAPI host for the scraper API.
            timeout_seconds: Request timeout in seconds.
            client: Pre-built HTTP client (tests).

        Raises:
            ConfigurationError: If no API key is provided.
        """
        if not api_key:
            raise ConfigurationError("RapidAPI key required", config_key="RAPIDAPI_KEY")
        self._api_key = api_key
        self._host = host
        self._timeout = timeout_seconds
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"https://{self._host}/v1/post_info"

    async def __aenter__(self) -> "RapidAPIReelAdapter":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers={
                    "X-RapidAPI-Key": self._api_key,
                    "X-RapidAPI-Host": self._host,
                },
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, url: str) -> dict[str, Any]:
        client = await self._ensure_client()

        try:
            response = await client.get(self.endpoint, params={"code_or_id_or_url": url})
        except httpx.TimeoutException as e:
            raise CollectorTimeoutError(self.name, f"Request timeout: {e}", {"url": url}) from e
        except httpx.RequestError as e:
            raise CollectorError(self.name, f"Request failed: {e}", {"url": url}) from e

        if response.status_code == 429:
            raise CollectorRateLimitError(self.name, "Rate limited by RapidAPI", {"url": url})
        if response.status_code in (401, 403):
            raise CollectorAuthError(self.name, "RapidAPI key rejected", {"status_code": response.status_code})
        if response.status_code == 404:
            raise CollectorNotFoundError(self.name, "Reel not found", {"url": url})
        if response.status_code >= 400:
            raise CollectorError(
                self.name,
                f"API error {response.status_code}",
                {"url": url, "status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise CollectorError(self.name, "Response was not JSON", {"url": url}) from e

    async def attempt(self, url: str) -> ScrapedReel:
        logger.info("rapidapi_scrape_started", url=url)

        payload = await self._request(url)
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict) or not data:
            raise CollectorError(self.name, "Invalid data structure received from API", {"url": url})

        return transform_rapidapi_reel(data)

    async def health_check(self) -> bool:
        return bool(self._api_key)
