"""Store-backed comparison and per-user analytics."""

from typing import Sequence

import structlog

from reellens.analysis.aggregation import compare, normalize_username, user_analytics
from reellens.models.schemas import ComparisonResult, UserAnalytics
from reellens.storage.base import ReelStore

logger = structlog.get_logger(__name__)


async def compare_reels(store: ReelStore, urls: Sequence[str]) -> ComparisonResult:
    """
    Compare already-analyzed reels. Never triggers scraping.

    Args:
        store: Record store.
        urls: Reel URLs to compare.

    Raises:
        NotFoundError: If none of the URLs has a stored record.
    """
    records = await store.find_by_urls(urls)
    logger.info("compare_requested", requested=len(urls), found=len(records))
    summary = compare(records)
    return ComparisonResult(reels=records, comparison=summary)


async def get_user_analytics(store: ReelStore, username: str) -> UserAnalytics:
    """
    Aggregate every stored reel of one creator.

    Raises:
        NotFoundError: If the creator has no stored reels.
    """
    key = normalize_username(username)
    records = await store.find_by_username(key)
    logger.info("user_analytics_requested", username=key, found=len(records))
    return user_analytics(records)
