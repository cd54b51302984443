"""
Pytest Configuration and Shared Fixtures.

This module provides common fixtures for all tests:

- apify_item / rapidapi_data / shared_data: Sample provider payloads
- scraped_reel: A normalized ScrapedReel
- StubAdapter: Scripted adapter that counts its calls
- FakeAnalyzer: Analyzer returning a fixed AnalysisResult
- memory_store: Fresh InMemoryReelStore
- make_record: Factory for persisted ReelRecords
"""

from datetime import datetime, timedelta, timezone

import pytest

from reellens.collectors.base import BaseReelAdapter
from reellens.models.schemas import (
    AnalysisResult,
    ProcessedComment,
    RawComment,
    ReelRecord,
    ScrapedReel,
    SentimentLabel,
    SentimentResult,
    StrategicInsights,
)
from reellens.storage.memory import InMemoryReelStore

REEL_URL = "https://www.instagram.com/reel/DFMgjRsS_Xw/"

FIXED_NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Provider Payloads
# =============================================================================


@pytest.fixture
def apify_item() -> dict:
    """Return one Apify instagram-scraper dataset item."""
    return {
        "id": "3551234567890",
        "shortCode": "DFMgjRsS_Xw",
        "ownerUsername": "wanderlust.jane",
        "ownerProfilePicUrl": "https://cdn.example.com/jane.jpg",
        "ownerFollowersCount": 48200,
        "ownerFollowingCount": 512,
        "ownerPostsCount": 730,
        "caption": "Sunrise over Santorini #travel #Greece #travel",
        "videoViewCount": 120000,
        "videoPlayCount": 150000,
        "likesCount": 9400,
        "commentsCount": 310,
        "videoDuration": 14.6,
        "timestamp": "2025-03-08T06:30:00.000Z",
        "displayUrl": "https://cdn.example.com/thumb.jpg",
        "latestComments": [
            {
                "id": "c1",
                "text": "This view is unreal, adding Santorini to my list",
                "ownerUsername": "mike_travels",
                "likesCount": 42,
                "timestamp": "2025-03-08T07:00:00.000Z",
                "repliesCount": 3,
            },
            {
                "id": "c2",
                "text": "Follow me for free followers!!!",
                "owner": {"username": "bot_account"},
                "likesCount": 0,
                "timestamp": "2025-03-08T07:05:00.000Z",
            },
        ],
    }


@pytest.fixture
def rapidapi_data() -> dict:
    """Return the ``data`` object of a RapidAPI post_info response."""
    return {
        "shortcode": "DFMgjRsS_Xw",
        "owner": {
            "username": "wanderlust.jane",
            "profile_pic_url": "https://cdn.example.com/jane.jpg",
            "edge_followed_by": {"count": 48200},
            "edge_follow": {"count": 512},
        },
        "edge_media_to_caption": {
            "edges": [{"node": {"text": "Sunrise over Santorini #travel"}}],
        },
        "video_view_count": 120000,
        "edge_media_preview_like": {"count": 9400},
        "edge_media_to_comment": {
            "count": 310,
            "edges": [
                {
                    "node": {
                        "id": "c1",
                        "text": "Stunning colors",
                        "owner": {"username": "mike_travels"},
                        "edge_liked_by": {"count": 5},
                        "created_at": 1741417200,
                    }
                },
            ],
        },
        "video_duration": 14.6,
        "taken_at_timestamp": 1741415400,
        "display_url": "https://cdn.example.com/thumb.jpg",
    }


@pytest.fixture
def shared_data(rapidapi_data) -> dict:
    """Return a ``window._sharedData`` object carrying one reel."""
    return {"entry_data": {"PostPage": [{"graphql": {"shortcode_media": rapidapi_data}}]}}


# =============================================================================
# Domain Objects
# =============================================================================


@pytest.fixture
def scraped_reel() -> ScrapedReel:
    """Return a normalized reel with three comments."""
    return ScrapedReel(
        reel_id="DFMgjRsS_Xw",
        username="wanderlust.jane",
        user_followers=48200,
        user_following=512,
        user_posts_count=730,
        caption="Sunrise over Santorini #travel #Greece",
        view_count=1000,
        likes_count=100,
        comments_count=50,
        shares_count=10,
        duration=14.6,
        post_date=FIXED_NOW - timedelta(days=2),
        comments=[
            RawComment(id="c1", text="Amazing sunrise colors", author="mike", likes=42),
            RawComment(id="c2", text="Follow me for followers", author="bot", likes=0),
            RawComment(id="c3", text="Santorini sunrise is amazing", author="ana", likes=7),
        ],
        provider="stub",
    )


class StubAdapter(BaseReelAdapter):
    """Adapter that returns a fixed reel or raises a fixed error."""

    def __init__(self, name: str, reel: ScrapedReel | None = None, error: Exception | None = None):
        self.name = name
        self.reel = reel
        self.error = error
        self.calls: list[str] = []

    async def attempt(self, url: str) -> ScrapedReel:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.reel

    async def health_check(self) -> bool:
        return True


class FakeAnalyzer:
    """Analyzer double returning a positive analysis for every comment."""

    def __init__(self, category: str = "travel"):
        self.category = category
        self.calls = 0

    async def analyze(self, reel: ScrapedReel, engagement_rate: float = 0.0) -> AnalysisResult:
        self.calls += 1
        sentiment = SentimentResult(
            positive=80, negative=5, neutral=15, overall=SentimentLabel.POSITIVE, score=0.7
        )
        return AnalysisResult(
            caption_sentiment=sentiment,
            comments_sentiment=sentiment,
            processed_comments=[
                ProcessedComment.from_raw(c, sentiment=SentimentLabel.POSITIVE, is_spam=c.id == "c2")
                for c in reel.comments
            ],
            category=self.category,
            strategic_insights=StrategicInsights.default(),
        )


@pytest.fixture
def fake_analyzer() -> FakeAnalyzer:
    return FakeAnalyzer()


@pytest.fixture
def memory_store() -> InMemoryReelStore:
    """Fresh in-memory store for each test."""
    return InMemoryReelStore()


@pytest.fixture
def make_record():
    """Factory for persisted records with overridable fields."""

    def _make(
        url: str = REEL_URL,
        username: str = "wanderlust.jane",
        engagement_rate: float = 3.0,
        positive: int = 50,
        overall: SentimentLabel = SentimentLabel.NEUTRAL,
        post_date: datetime = FIXED_NOW,
        **overrides,
    ) -> ReelRecord:
        sentiment = SentimentResult(
            positive=positive,
            negative=0,
            neutral=100 - positive,
            overall=overall,
            score=0.0,
        )
        fields = {
            "url": url,
            "reel_id": url.rstrip("/").rsplit("/", 1)[-1],
            "username": username,
            "view_count": 1000,
            "likes_count": 100,
            "comments_count": 10,
            "engagement_rate": engagement_rate,
            "overall_sentiment": sentiment,
            "post_date": post_date,
            "last_updated": FIXED_NOW,
            "created_at": FIXED_NOW,
        }
        fields.update(overrides)
        return ReelRecord(**fields)

    return _make
