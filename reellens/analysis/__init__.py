"""
Reel analysis: model-backed sentiment, deterministic metrics, aggregation.

Example:
    from reellens.analysis import ReelAnalyzer, engagement_rate

    rate = engagement_rate(reel.likes_count, reel.comments_count, reel.view_count)
    result = await ReelAnalyzer(api_key="...").analyze(reel, rate)
"""

from reellens.analysis.aggregation import (
    compare,
    generate_recommendations,
    normalize_username,
    user_analytics,
)
from reellens.analysis.metrics import (
    count_spam,
    engagement_rate,
    extract_hashtags,
    overall_sentiment,
    round_half_up,
    top_comments,
    virality_score,
    word_cloud,
)
from reellens.analysis.profile import analyze_profile, influencer_tier
from reellens.analysis.sentiment import (
    ReelAnalyzer,
    extract_json_object,
    fallback_analysis,
)

__all__ = [
    "compare",
    "generate_recommendations",
    "normalize_username",
    "user_analytics",
    "count_spam",
    "engagement_rate",
    "extract_hashtags",
    "overall_sentiment",
    "round_half_up",
    "top_comments",
    "virality_score",
    "word_cloud",
    "analyze_profile",
    "influencer_tier",
    "ReelAnalyzer",
    "extract_json_object",
    "fallback_analysis",
]
