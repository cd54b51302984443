"""Author-level analysis derived from the counts embedded in a scraped reel."""

from reellens.models.schemas import (
    AccountHealth,
    InfluencerTier,
    ProfileAnalysis,
    ProfileContentStrategy,
    ReelPerformance,
    ScrapedReel,
)

MACRO_THRESHOLD = 10_000
MEGA_THRESHOLD = 100_000
CELEBRITY_THRESHOLD = 1_000_000


def safe_ratio(numerator: float, denominator: int | None) -> float:
    """numerator / denominator, or 0 when the denominator is unknown or zero."""
    if not denominator:
        return 0.0
    return numerator / denominator


def influencer_tier(followers: int | None) -> InfluencerTier:
    """Band an author by follower count; unknown counts as 0 (micro)."""
    followers = followers or 0
    if followers >= CELEBRITY_THRESHOLD:
        return InfluencerTier.CELEBRITY
    if followers >= MEGA_THRESHOLD:
        return InfluencerTier.MEGA
    if followers >= MACRO_THRESHOLD:
        return InfluencerTier.MACRO
    return InfluencerTier.MICRO


def analyze_profile(reel: ScrapedReel, engagement_rate: float, category: str) -> ProfileAnalysis:
    """Build the profile analysis for a reel's author.

    Args:
        reel: Scraped reel carrying optional follower/following/post counts.
        engagement_rate: Engagement rate already computed for the reel.
        category: Content category assigned by the analysis gateway.
    """
    followers = reel.user_followers

    return ProfileAnalysis(
        influencer_tier=influencer_tier(followers),
        account_health=AccountHealth(
            follow_ratio=safe_ratio(followers or 0, reel.user_following),
            posts_to_followers_ratio=safe_ratio(reel.user_posts_count or 0, followers),
            avg_engagement_rate=engagement_rate,
        ),
        content_strategy=ProfileContentStrategy(content_categories=[category]),
        reel_performance=ReelPerformance(
            view_to_follower_ratio=safe_ratio(reel.view_count, followers),
            like_to_follower_ratio=safe_ratio(reel.likes_count, followers),
            comment_to_follower_ratio=safe_ratio(reel.comments_count, followers),
        ),
    )
