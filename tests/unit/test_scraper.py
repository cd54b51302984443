"""Unit tests for the provider adapters and the fallback chain."""

import json

import httpx
import pytest
from unittest.mock import MagicMock

from reellens.collectors.instagram.apify import ApifyReelAdapter
from reellens.collectors.instagram.html import HTMLReelAdapter
from reellens.collectors.instagram.rapidapi import RapidAPIReelAdapter
from reellens.collectors.registry import (
    DEFAULT_ADAPTER_ORDER,
    AdapterType,
    get_adapter,
    list_adapters,
)
from reellens.collectors.scraper import ReelScraper, extract_reel_id
from reellens.core.exceptions import (
    AllProvidersFailedError,
    CollectorAuthError,
    CollectorError,
    CollectorNotFoundError,
    CollectorRateLimitError,
    CollectorTimeoutError,
    ConfigurationError,
    InvalidReelURLError,
)
from tests.conftest import REEL_URL, StubAdapter


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestExtractReelId:
    """Test reel shortcode extraction."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://www.instagram.com/reel/DFMgjRsS_Xw/", "DFMgjRsS_Xw"),
            ("https://instagram.com/reel/abc-123?igsh=xyz", "abc-123"),
            ("https://www.instagram.com/p/abc/", ""),
        ],
    )
    def test_extract(self, url, expected):
        assert extract_reel_id(url) == expected


class TestReelScraper:
    """Test the ordered fallback chain."""

    @pytest.mark.asyncio
    async def test_first_success_wins(self, scraped_reel):
        first = StubAdapter("apify", reel=scraped_reel)
        second = StubAdapter("rapidapi", reel=scraped_reel)
        scraper = ReelScraper([first, second])

        reel = await scraper.fetch_post(REEL_URL)

        assert reel == scraped_reel
        assert first.calls == [REEL_URL]
        assert second.calls == []

    @pytest.mark.asyncio
    async def test_falls_back_in_order(self, scraped_reel):
        first = StubAdapter("apify", error=CollectorError("apify", "actor failed"))
        second = StubAdapter("rapidapi", error=RuntimeError("boom"))
        third = StubAdapter("html", reel=scraped_reel)
        scraper = ReelScraper([first, second, third])

        reel = await scraper.fetch_post(REEL_URL)

        assert reel == scraped_reel
        assert len(first.calls) == len(second.calls) == len(third.calls) == 1

    @pytest.mark.asyncio
    async def test_transient_errors_are_not_retried(self, scraped_reel):
        limited = StubAdapter("apify", error=CollectorRateLimitError("apify", "429"))
        slow = StubAdapter("rapidapi", error=CollectorTimeoutError("rapidapi", "timed out"))
        backup = StubAdapter("html", reel=scraped_reel)

        reel = await ReelScraper([limited, slow, backup]).fetch_post(REEL_URL)

        assert reel == scraped_reel
        assert len(limited.calls) == len(slow.calls) == 1

    @pytest.mark.asyncio
    async def test_all_failed(self):
        scraper = ReelScraper([
            StubAdapter("apify", error=CollectorError("apify", "actor failed")),
            StubAdapter("html", error=CollectorError("html", "Could not extract Instagram data")),
        ])

        with pytest.raises(AllProvidersFailedError) as exc_info:
            await scraper.fetch_post(REEL_URL)

        assert set(exc_info.value.errors) == {"apify", "html"}
        assert "Could not extract Instagram data" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_each_call_restarts_chain(self, scraped_reel):
        failing = StubAdapter("apify", error=CollectorError("apify", "down"))
        backup = StubAdapter("html", reel=scraped_reel)
        scraper = ReelScraper([failing, backup])

        await scraper.fetch_post(REEL_URL)
        await scraper.fetch_post(REEL_URL)

        assert len(failing.calls) == 2

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        adapter = StubAdapter("apify")
        with pytest.raises(InvalidReelURLError):
            await ReelScraper([adapter]).fetch_post("https://www.instagram.com/p/abc/")
        assert adapter.calls == []

    @pytest.mark.asyncio
    async def test_empty_chain(self):
        with pytest.raises(AllProvidersFailedError, match="No scraping providers configured"):
            await ReelScraper([]).fetch_post(REEL_URL)


class TestRegistry:
    """Test adapter registration."""

    def test_all_providers_registered(self):
        assert set(list_adapters()) >= set(DEFAULT_ADAPTER_ORDER)

    def test_default_order(self):
        assert DEFAULT_ADAPTER_ORDER == (AdapterType.APIFY, AdapterType.RAPIDAPI, AdapterType.HTML)

    def test_get_adapter(self):
        adapter = get_adapter(AdapterType.HTML, timeout_seconds=5)
        assert isinstance(adapter, HTMLReelAdapter)


class TestApifyAdapter:
    """Test the Apify adapter with a mocked client."""

    def _client(self, items):
        client = MagicMock()
        client.actor.return_value.call.return_value = {"defaultDatasetId": "ds1"}
        client.dataset.return_value.iterate_items.return_value = iter(items)
        return client

    def test_requires_token(self):
        with pytest.raises(ConfigurationError):
            ApifyReelAdapter(api_token=None)

    @pytest.mark.asyncio
    async def test_attempt(self, apify_item):
        client = self._client([apify_item])
        adapter = ApifyReelAdapter(api_token="token", client=client)

        reel = await adapter.attempt(REEL_URL)

        assert reel.reel_id == "DFMgjRsS_Xw"
        run_input = client.actor.return_value.call.call_args.kwargs["run_input"]
        assert run_input["directUrls"] == [REEL_URL]
        assert run_input["resultsLimit"] == 1

    @pytest.mark.asyncio
    async def test_no_items(self):
        adapter = ApifyReelAdapter(api_token="token", client=self._client([]))

        with pytest.raises(CollectorNotFoundError):
            await adapter.attempt(REEL_URL)

    @pytest.mark.asyncio
    async def test_client_failure_wrapped(self):
        client = MagicMock()
        client.actor.return_value.call.side_effect = RuntimeError("quota exceeded")
        adapter = ApifyReelAdapter(api_token="token", client=client)

        with pytest.raises(CollectorError, match="quota exceeded"):
            await adapter.attempt(REEL_URL)


class TestRapidAPIAdapter:
    """Test the RapidAPI adapter over a mock transport."""

    def test_requires_key(self):
        with pytest.raises(ConfigurationError):
            RapidAPIReelAdapter(api_key="")

    @pytest.mark.asyncio
    async def test_attempt(self, rapidapi_data):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            seen["path"] = request.url.path
            return httpx.Response(200, json={"data": rapidapi_data})

        adapter = RapidAPIReelAdapter(api_key="key", client=_mock_client(handler))
        reel = await adapter.attempt(REEL_URL)

        assert reel.provider == "rapidapi"
        assert seen["path"] == "/v1/post_info"
        assert seen["params"] == {"code_or_id_or_url": REEL_URL}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status_code, error_type",
        [
            (429, CollectorRateLimitError),
            (401, CollectorAuthError),
            (403, CollectorAuthError),
            (404, CollectorNotFoundError),
            (500, CollectorError),
        ],
    )
    async def test_status_mapping(self, status_code, error_type):
        adapter = RapidAPIReelAdapter(
            api_key="key",
            client=_mock_client(lambda request: httpx.Response(status_code)),
        )
        with pytest.raises(error_type):
            await adapter.attempt(REEL_URL)

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        adapter = RapidAPIReelAdapter(api_key="key", client=_mock_client(handler))
        with pytest.raises(CollectorTimeoutError):
            await adapter.attempt(REEL_URL)

    @pytest.mark.asyncio
    async def test_empty_data(self):
        adapter = RapidAPIReelAdapter(
            api_key="key",
            client=_mock_client(lambda request: httpx.Response(200, json={"data": {}})),
        )
        with pytest.raises(CollectorError, match="Invalid data structure"):
            await adapter.attempt(REEL_URL)


class TestHTMLAdapter:
    """Test the page-scrape adapter over a mock transport."""

    @pytest.mark.asyncio
    async def test_attempt(self, shared_data):
        page = f"<html><script>window._sharedData = {json.dumps(shared_data)};</script></html>"
        adapter = HTMLReelAdapter(client=_mock_client(lambda request: httpx.Response(200, text=page)))

        reel = await adapter.attempt(REEL_URL)

        assert reel.provider == "html"
        assert reel.username == "wanderlust.jane"

    @pytest.mark.asyncio
    async def test_page_without_data(self):
        adapter = HTMLReelAdapter(
            client=_mock_client(lambda request: httpx.Response(200, text="<html></html>"))
        )
        with pytest.raises(CollectorError, match="Could not extract Instagram data"):
            await adapter.attempt(REEL_URL)

    @pytest.mark.asyncio
    async def test_http_error(self):
        adapter = HTMLReelAdapter(client=_mock_client(lambda request: httpx.Response(503)))
        with pytest.raises(CollectorError, match="Page fetch failed"):
            await adapter.attempt(REEL_URL)
