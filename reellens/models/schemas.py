"""Pydantic models for ReelLens core entities.

Every domain model is frozen: a value is built once at a component boundary
and passed along unchanged. Models serialize to camelCase (``reelId``,
``engagementRate``) and accept either camelCase or snake_case on input.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def normalize_username(name: str) -> str:
    """Lowercase a handle and drop one leading '@'."""
    name = name.strip().lower()
    return name[1:] if name.startswith("@") else name


class SentimentLabel(str, Enum):
    """Overall sentiment classification."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ViralPotential(str, Enum):
    """Model-assessed viral potential of a reel."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class InfluencerTier(str, Enum):
    """Follower-count bands for the reel author."""
    MICRO = "micro"
    MACRO = "macro"
    MEGA = "mega"
    CELEBRITY = "celebrity"


# Closed set of content categories the model may answer with; anything else
# is stored as DEFAULT_CATEGORY.
CONTENT_CATEGORIES: frozenset[str] = frozenset({
    "travel",
    "lifestyle",
    "beauty",
    "tech",
    "food",
    "fitness",
    "entertainment",
    "education",
    "business",
    "fashion",
    "art",
    "music",
    "comedy",
    "sports",
    "news",
    "other",
})

DEFAULT_CATEGORY = "general"

MAX_COMMENTS_PER_REEL = 20


# =============================================================================
# Base Model
# =============================================================================


class ReelModel(BaseModel):
    """Base model: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_api(self) -> dict[str, Any]:
        """Serialize to the JSON shape returned by the API."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Scraped Data
# =============================================================================


class RawComment(ReelModel):
    """One scraped comment, as returned by a provider adapter."""

    id: str
    text: str = ""
    author: str = ""
    likes: int = Field(default=0, ge=0)
    timestamp: datetime = Field(default_factory=utcnow)
    replies: int = Field(default=0, ge=0)


class ScrapedReel(ReelModel):
    """Canonical reel produced by any provider adapter.

    Profile counts are None when the provider does not expose them; engagement
    counts default to 0.
    """

    reel_id: str = ""
    username: str = ""
    user_profile_pic: str = ""
    user_followers: int | None = Field(default=None, ge=0)
    user_following: int | None = Field(default=None, ge=0)
    user_posts_count: int | None = Field(default=None, ge=0)

    caption: str = ""
    view_count: int = Field(default=0, ge=0)
    likes_count: int = Field(default=0, ge=0)
    comments_count: int = Field(default=0, ge=0)
    shares_count: int = Field(default=0, ge=0)
    duration: float = Field(default=0.0, ge=0)
    post_date: datetime = Field(default_factory=utcnow)
    thumbnail_url: str = ""
    is_sponsored: bool = Field(default=False, description="Paid partnership or sponsored post")
    audio: str = Field(default="", description="Audio track label; empty when unknown")

    comments: list[RawComment] = Field(default_factory=list, max_length=MAX_COMMENTS_PER_REEL)

    provider: str = Field(default="", description="Adapter that produced this reel")


# =============================================================================
# Analysis
# =============================================================================


class SentimentResult(ReelModel):
    """Sentiment breakdown over a span of text."""

    positive: int = Field(default=0, ge=0, le=100)
    negative: int = Field(default=0, ge=0, le=100)
    neutral: int = Field(default=100, ge=0, le=100)
    overall: SentimentLabel = SentimentLabel.NEUTRAL
    score: float = Field(default=0.0, ge=-1.0, le=1.0)

    @classmethod
    def neutral_default(cls) -> "SentimentResult":
        return cls(positive=0, negative=0, neutral=100, overall=SentimentLabel.NEUTRAL, score=0.0)


class ProcessedComment(RawComment):
    """A scraped comment plus its model-assigned sentiment and spam flag."""

    sentiment: SentimentLabel = SentimentLabel.NEUTRAL
    is_spam: bool = False

    @classmethod
    def from_raw(
        cls,
        comment: RawComment,
        sentiment: SentimentLabel = SentimentLabel.NEUTRAL,
        is_spam: bool = False,
    ) -> "ProcessedComment":
        base = comment.model_dump(include=set(RawComment.model_fields))
        return cls(**base, sentiment=sentiment, is_spam=is_spam)


class ContentStrategyInsights(ReelModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    opportunities: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class AudienceInsights(ReelModel):
    demographics: dict[str, float] = Field(default_factory=dict)
    engagement_patterns: list[str] = Field(default_factory=list)
    behavior_insights: list[str] = Field(default_factory=list)


class PerformanceInsights(ReelModel):
    viral_potential: ViralPotential = ViralPotential.MEDIUM
    content_optimization: list[str] = Field(default_factory=list)
    timing_recommendations: list[str] = Field(default_factory=list)


class StrategicInsights(ReelModel):
    """Best-effort advisory output from the language model."""

    content_strategy: ContentStrategyInsights = Field(default_factory=ContentStrategyInsights)
    audience_insights: AudienceInsights = Field(default_factory=AudienceInsights)
    performance_analysis: PerformanceInsights = Field(default_factory=PerformanceInsights)

    @classmethod
    def default(cls) -> "StrategicInsights":
        """Deterministic boilerplate used whenever the model is unavailable."""
        return cls(
            content_strategy=ContentStrategyInsights(
                strengths=["High engagement rate", "Positive audience response"],
                weaknesses=[],
                opportunities=["Optimize posting timing", "Increase content variety"],
                recommendations=[
                    "Post consistently to build audience expectations",
                    "Reply to top comments to boost engagement",
                ],
            ),
            audience_insights=AudienceInsights(
                demographics={"18-24": 30, "25-34": 40, "35-44": 20, "45+": 10},
                engagement_patterns=[
                    "High engagement in evenings",
                    "Peak activity on weekends",
                ],
                behavior_insights=[],
            ),
            performance_analysis=PerformanceInsights(
                viral_potential=ViralPotential.MEDIUM,
                content_optimization=["Use a strong hook in the first 3 seconds"],
                timing_recommendations=["Post between 6pm and 9pm local time"],
            ),
        )


class AnalysisResult(ReelModel):
    """Output of one batched analysis call (or its fallback)."""

    caption_sentiment: SentimentResult
    comments_sentiment: SentimentResult
    processed_comments: list[ProcessedComment] = Field(default_factory=list)
    category: str = DEFAULT_CATEGORY
    strategic_insights: StrategicInsights = Field(default_factory=StrategicInsights.default)
    is_fallback: bool = False


# =============================================================================
# Derived Metrics
# =============================================================================


class HashtagCount(ReelModel):
    tag: str
    count: int = Field(..., ge=1)


class WordCount(ReelModel):
    word: str
    count: int = Field(..., ge=1)


class AccountHealth(ReelModel):
    follow_ratio: float = 0.0
    posts_to_followers_ratio: float = 0.0
    avg_engagement_rate: float = 0.0


class ProfileContentStrategy(ReelModel):
    # Reel payloads carry none of these signals; they stay at their defaults
    # until a profile scrape is added.
    is_business_account: bool = False
    is_verified: bool = False
    has_external_link: bool = False
    uses_stories: bool = False
    uses_igtv: bool = False
    posting_frequency: str = "Unknown"
    content_categories: list[str] = Field(default_factory=list)


class ReelPerformance(ReelModel):
    view_to_follower_ratio: float = 0.0
    like_to_follower_ratio: float = 0.0
    comment_to_follower_ratio: float = 0.0


class ProfileAnalysis(ReelModel):
    """Author-level analysis derived from the counts embedded in a reel."""

    influencer_tier: InfluencerTier = InfluencerTier.MICRO
    account_health: AccountHealth = Field(default_factory=AccountHealth)
    content_strategy: ProfileContentStrategy = Field(default_factory=ProfileContentStrategy)
    reel_performance: ReelPerformance = Field(default_factory=ReelPerformance)


# =============================================================================
# Persisted Record
# =============================================================================


class ReelRecord(ScrapedReel):
    """The single persisted, merged representation of an analyzed reel."""

    url: str

    comments: list[ProcessedComment] = Field(default_factory=list, max_length=MAX_COMMENTS_PER_REEL)

    engagement_rate: float = Field(default=0.0, ge=0)
    virality_score: int = Field(default=0, ge=0)
    hashtags: list[HashtagCount] = Field(default_factory=list)
    top_comments: list[ProcessedComment] = Field(default_factory=list, max_length=10)
    spam_comments_count: int = Field(default=0, ge=0)
    word_cloud: list[WordCount] = Field(default_factory=list, max_length=20)

    caption_sentiment: SentimentResult = Field(default_factory=SentimentResult.neutral_default)
    comments_sentiment: SentimentResult = Field(default_factory=SentimentResult.neutral_default)
    overall_sentiment: SentimentResult = Field(default_factory=SentimentResult.neutral_default)

    category: str = DEFAULT_CATEGORY
    strategic_insights: StrategicInsights = Field(default_factory=StrategicInsights.default)
    profile_analysis: ProfileAnalysis = Field(default_factory=ProfileAnalysis)

    last_updated: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# Aggregates
# =============================================================================


class ComparisonSummary(ReelModel):
    average_engagement_rate: float
    top_performer: str
    sentiment_winner: str
    insights: list[str] = Field(default_factory=list)


class ComparisonResult(ReelModel):
    reels: list[ReelRecord]
    comparison: ComparisonSummary


class SentimentTrend(ReelModel):
    """Percentage of reels whose overall label is each value."""

    positive: int = 0
    negative: int = 0
    neutral: int = 0


class UserAnalytics(ReelModel):
    username: str
    profile_pic: str = ""
    total_reels_analyzed: int
    average_engagement: float
    total_views: int
    total_likes: int
    total_comments: int
    best_performing_reel: ReelRecord | None = None
    recent_reels: list[ReelRecord] = Field(default_factory=list)
    category_breakdown: dict[str, int] = Field(default_factory=dict)
    sentiment_trend: SentimentTrend = Field(default_factory=SentimentTrend)
    recommendations: list[str] = Field(default_factory=list)
