"""Instagram reel adapters.

Provides one adapter per scraping provider (Apify, RapidAPI, raw page
scrape) and the normalizer functions that map each payload to ScrapedReel.
"""

from reellens.collectors.instagram.apify import ApifyReelAdapter
from reellens.collectors.instagram.html import HTMLReelAdapter, extract_shared_data
from reellens.collectors.instagram.normalizer import (
    transform_apify_reel,
    transform_rapidapi_reel,
    transform_shared_data,
)
from reellens.collectors.instagram.rapidapi import RapidAPIReelAdapter

__all__ = [
    "ApifyReelAdapter",
    "HTMLReelAdapter",
    "RapidAPIReelAdapter",
    "extract_shared_data",
    "transform_apify_reel",
    "transform_rapidapi_reel",
    "transform_shared_data",
]
