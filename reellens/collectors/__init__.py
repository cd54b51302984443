"""
Reel Scraping Providers.

Each provider is an adapter with a single ``attempt(url)`` method that
returns a ScrapedReel or raises CollectorError. ReelScraper iterates the
adapters in preference order until one succeeds.

Example:
    from reellens.collectors import ReelScraper, ApifyReelAdapter, HTMLReelAdapter

    scraper = ReelScraper([ApifyReelAdapter(api_token="..."), HTMLReelAdapter()])
    reel = await scraper.fetch_post("https://www.instagram.com/reel/abc123/")
"""

from reellens.collectors.base import BaseReelAdapter
from reellens.collectors.instagram import (
    ApifyReelAdapter,
    HTMLReelAdapter,
    RapidAPIReelAdapter,
)
from reellens.collectors.registry import (
    DEFAULT_ADAPTER_ORDER,
    AdapterType,
    get_adapter,
    list_adapters,
    register_adapter,
)
from reellens.collectors.scraper import ReelScraper, extract_reel_id

__all__ = [
    "BaseReelAdapter",
    "ApifyReelAdapter",
    "HTMLReelAdapter",
    "RapidAPIReelAdapter",
    "DEFAULT_ADAPTER_ORDER",
    "AdapterType",
    "get_adapter",
    "list_adapters",
    "register_adapter",
    "ReelScraper",
    "extract_reel_id",
]
