"""
Cross-reel aggregation.

Comparison summaries, per-user analytics and rule-based recommendations.
Everything here works on already-persisted ReelRecords; nothing scrapes.
"""

from collections import Counter
from typing import Sequence

from reellens.analysis.metrics import round_half_up
from reellens.core.exceptions import NotFoundError
from reellens.models.schemas import (
    ComparisonSummary,
    ReelRecord,
    SentimentLabel,
    SentimentTrend,
    UserAnalytics,
    normalize_username,
)

RECENT_REELS_LIMIT = 5
MAX_RECOMMENDATIONS = 5

LOW_ENGAGEMENT_THRESHOLD = 2.0
HIGH_ENGAGEMENT_THRESHOLD = 5.0
SPAM_SHARE_THRESHOLD = 0.2
HIGH_VIRALITY_THRESHOLD = 50


def _round2(value: float) -> float:
    return round_half_up(value * 100) / 100


def _first_max(records: Sequence[ReelRecord], key) -> ReelRecord:
    # max() returns the first of equal maxima
    return max(records, key=key)


def _average_engagement(records: Sequence[ReelRecord]) -> float:
    return sum(r.engagement_rate for r in records) / len(records)


# =============================================================================
# Comparison
# =============================================================================


def compare(records: Sequence[ReelRecord]) -> ComparisonSummary:
    """Summarize a set of reels against each other.

    Args:
        records: Persisted reels, in the order the store returned them.

    Returns:
        ComparisonSummary with the average engagement rate rounded to 2 dp.

    Raises:
        NotFoundError: If no records are given.
    """
    if not records:
        raise NotFoundError("No analyzed reels found. Please analyze the reels first.")

    average = _average_engagement(records)
    top_performer = _first_max(records, key=lambda r: r.engagement_rate)
    sentiment_winner = _first_max(records, key=lambda r: r.overall_sentiment.positive)

    insights = []
    above_average = sum(1 for r in records if r.engagement_rate > average)
    if above_average > 0:
        insights.append(
            f"{above_average} out of {len(records)} reels performed above average engagement rate"
        )

    return ComparisonSummary(
        average_engagement_rate=_round2(average),
        top_performer=f"@{top_performer.username}",
        sentiment_winner=f"@{sentiment_winner.username}",
        insights=insights,
    )


# =============================================================================
# User Analytics
# =============================================================================


def sentiment_trend(records: Sequence[ReelRecord]) -> SentimentTrend:
    """Share of reels (in whole percent) per overall sentiment label."""
    counts = Counter(r.overall_sentiment.overall for r in records)
    total = len(records)
    return SentimentTrend(
        positive=round_half_up(counts[SentimentLabel.POSITIVE] / total * 100),
        negative=round_half_up(counts[SentimentLabel.NEGATIVE] / total * 100),
        neutral=round_half_up(counts[SentimentLabel.NEUTRAL] / total * 100),
    )


def generate_recommendations(records: Sequence[ReelRecord]) -> list[str]:
    """Rule-based tips for a creator, at most five."""
    if not records:
        return []

    recommendations = []

    average = _average_engagement(records)
    if average < LOW_ENGAGEMENT_THRESHOLD:
        recommendations.append(
            "Focus on improving engagement - try more interactive content like polls or questions"
        )
    elif average > HIGH_ENGAGEMENT_THRESHOLD:
        recommendations.append(
            "Great engagement rate! Maintain this momentum with consistent posting"
        )

    total_comments = sum(len(r.comments) for r in records)
    spam_comments = sum(r.spam_comments_count for r in records)
    if total_comments and spam_comments / total_comments > SPAM_SHARE_THRESHOLD:
        recommendations.append(
            "A large share of comments look like spam - consider moderating or filtering your comment section"
        )

    negative = sum(1 for r in records if r.overall_sentiment.overall == SentimentLabel.NEGATIVE)
    if negative * 2 > len(records):
        recommendations.append(
            "Most of your reels draw negative sentiment - review recurring criticism in the comments"
        )

    categories = {r.category for r in records}
    if len(records) > 1 and len(categories) == 1:
        recommendations.append(
            f"All analyzed reels are {next(iter(categories))} content - experiment with another category to reach new audiences"
        )

    best_virality = max(r.virality_score for r in records)
    if best_virality >= HIGH_VIRALITY_THRESHOLD:
        recommendations.append(
            "Your best reel shows strong viral momentum - reuse its hook and format in upcoming posts"
        )

    return recommendations[:MAX_RECOMMENDATIONS]


def user_analytics(records: Sequence[ReelRecord]) -> UserAnalytics:
    """Roll up every analyzed reel of one creator.

    Raises:
        NotFoundError: If the creator has no analyzed reels.
    """
    if not records:
        raise NotFoundError("No analyzed reels found for this user")

    reels = sorted(records, key=lambda r: r.post_date, reverse=True)
    latest = reels[0]
    categories = Counter(r.category for r in reels if r.category)

    return UserAnalytics(
        username=latest.username,
        profile_pic=latest.user_profile_pic,
        total_reels_analyzed=len(reels),
        average_engagement=_round2(_average_engagement(reels)),
        total_views=sum(r.view_count for r in reels),
        total_likes=sum(r.likes_count for r in reels),
        total_comments=sum(r.comments_count for r in reels),
        best_performing_reel=_first_max(reels, key=lambda r: r.engagement_rate),
        recent_reels=reels[:RECENT_REELS_LIMIT],
        category_breakdown=dict(categories),
        sentiment_trend=sentiment_trend(reels),
        recommendations=generate_recommendations(reels),
    )
