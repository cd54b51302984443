"""
Record Reconciler.

Turns a reel URL into the single persisted ReelRecord for that URL:
scrape, analyze, derive metrics, merge, upsert. A fresh enough stored
record short-circuits the whole pipeline.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from reellens.analysis.metrics import (
    count_spam,
    engagement_rate,
    extract_hashtags,
    overall_sentiment,
    top_comments,
    virality_score,
    word_cloud,
)
from reellens.analysis.profile import analyze_profile
from reellens.analysis.sentiment import ReelAnalyzer
from reellens.collectors.scraper import ReelScraper, extract_reel_id
from reellens.models.schemas import (
    AnalysisResult,
    ReelRecord,
    ScrapedReel,
    utcnow,
)
from reellens.monitoring.metrics import record_reconcile
from reellens.storage.base import ReelStore

logger = structlog.get_logger(__name__)

DEFAULT_CACHE_TTL = timedelta(hours=1)


def build_record(
    url: str,
    reel: ScrapedReel,
    analysis: AnalysisResult,
    rate: float,
    now: datetime,
    existing: Optional[ReelRecord] = None,
) -> ReelRecord:
    """Merge scraped data, analysis output and derived metrics into one record.

    Args:
        url: Canonical URL the record is keyed by.
        reel: Scraped reel.
        analysis: Analysis gateway output (or its fallback).
        rate: Engagement rate already computed for the analysis prompt.
        now: Reconciliation time.
        existing: Previously stored record for ``url``, if any.
    """
    comments = analysis.processed_comments

    scraped = reel.model_dump(exclude={"comments"})
    scraped["reel_id"] = reel.reel_id or extract_reel_id(url)

    last_updated = now
    created_at = now
    if existing is not None:
        created_at = existing.created_at
        last_updated = max(now, existing.last_updated)

    return ReelRecord(
        **scraped,
        url=url,
        comments=comments,
        engagement_rate=rate,
        virality_score=virality_score(
            reel.view_count,
            reel.likes_count,
            reel.comments_count,
            reel.shares_count,
            reel.post_date,
            now,
        ),
        hashtags=extract_hashtags(reel.caption),
        top_comments=top_comments(comments),
        spam_comments_count=count_spam(comments),
        word_cloud=word_cloud(comment.text for comment in comments),
        caption_sentiment=analysis.caption_sentiment,
        comments_sentiment=analysis.comments_sentiment,
        overall_sentiment=overall_sentiment(analysis.caption_sentiment, analysis.comments_sentiment),
        category=analysis.category,
        strategic_insights=analysis.strategic_insights,
        profile_analysis=analyze_profile(reel, rate, analysis.category),
        last_updated=last_updated,
        created_at=created_at,
    )


class ReelReconciler:
    """
    Read-through cache in front of the scrape/analyze pipeline.

    Example:
        reconciler = ReelReconciler(scraper, analyzer, store)
        record = await reconciler.reconcile("https://www.instagram.com/reel/abc/")
    """

    def __init__(
        self,
        scraper: ReelScraper,
        analyzer: ReelAnalyzer,
        store: ReelStore,
        cache_ttl: timedelta = DEFAULT_CACHE_TTL,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.scraper = scraper
        self.analyzer = analyzer
        self.store = store
        self.cache_ttl = cache_ttl
        self.clock = clock

    def is_fresh(self, record: ReelRecord, now: datetime) -> bool:
        return now - record.last_updated < self.cache_ttl

    async def reconcile(self, url: str, force_refresh: bool = False) -> ReelRecord:
        """
        Return the record for ``url``, refreshing it when stale.

        Args:
            url: Instagram reel URL.
            force_refresh: Skip the freshness check and always re-scrape.

        Returns:
            The cached record on a hit, otherwise the newly stored record.

        Raises:
            InvalidReelURLError: If the URL has no reel shortcode.
            AllProvidersFailedError: If every scraping provider failed.
            StorageError: If the store cannot be read or written.
        """
        existing = await self.store.get_by_url(url)

        if existing is not None and not force_refresh and self.is_fresh(existing, self.clock()):
            logger.info("reconcile_cache_hit", url=url)
            record_reconcile("cache_hit")
            return existing

        logger.info("reconcile_started", url=url, force_refresh=force_refresh)

        reel = await self.scraper.fetch_post(url)
        rate = engagement_rate(reel.likes_count, reel.comments_count, reel.view_count)
        analysis = await self.analyzer.analyze(reel, rate)

        record = build_record(url, reel, analysis, rate, self.clock(), existing)
        stored = await self.store.upsert(record)

        record_reconcile("refreshed")
        logger.info(
            "reconcile_completed",
            url=url,
            provider=reel.provider,
            analysis_fallback=analysis.is_fallback,
            engagement_rate=round(record.engagement_rate, 2),
        )
        return stored
