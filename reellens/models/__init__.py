"""
Data Models.

Pydantic models for scraped reels, analysis output, persisted records,
and aggregates. All models are immutable and serialize to camelCase.
"""

from reellens.models.schemas import (
    CONTENT_CATEGORIES,
    DEFAULT_CATEGORY,
    MAX_COMMENTS_PER_REEL,
    AccountHealth,
    AnalysisResult,
    AudienceInsights,
    ComparisonResult,
    ComparisonSummary,
    ContentStrategyInsights,
    HashtagCount,
    InfluencerTier,
    PerformanceInsights,
    ProcessedComment,
    ProfileAnalysis,
    ProfileContentStrategy,
    RawComment,
    ReelPerformance,
    ReelRecord,
    ScrapedReel,
    SentimentLabel,
    SentimentResult,
    SentimentTrend,
    StrategicInsights,
    UserAnalytics,
    ViralPotential,
    WordCount,
    normalize_username,
    utcnow,
)

__all__ = [
    "CONTENT_CATEGORIES",
    "DEFAULT_CATEGORY",
    "MAX_COMMENTS_PER_REEL",
    "AccountHealth",
    "AnalysisResult",
    "AudienceInsights",
    "ComparisonResult",
    "ComparisonSummary",
    "ContentStrategyInsights",
    "HashtagCount",
    "InfluencerTier",
    "PerformanceInsights",
    "ProcessedComment",
    "ProfileAnalysis",
    "ProfileContentStrategy",
    "RawComment",
    "ReelPerformance",
    "ReelRecord",
    "ScrapedReel",
    "SentimentLabel",
    "SentimentResult",
    "SentimentTrend",
    "StrategicInsights",
    "UserAnalytics",
    "ViralPotential",
    "WordCount",
    "normalize_username",
    "utcnow",
]
