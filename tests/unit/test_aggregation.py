"""Unit tests for comparison, creator analytics and recommendations."""

from datetime import timedelta

import pytest

from reellens.analysis.aggregation import (
    compare,
    generate_recommendations,
    user_analytics,
)
from reellens.core.exceptions import NotFoundError
from reellens.models.schemas import ProcessedComment, SentimentLabel, normalize_username
from tests.conftest import FIXED_NOW


def _url(n: int) -> str:
    return f"https://www.instagram.com/reel/reel{n}/"


class TestNormalizeUsername:
    @pytest.mark.parametrize(
        "raw, expected",
        [("@Jane.Doe", "jane.doe"), ("jane_doe", "jane_doe"), ("  @@x ", "@x")],
    )
    def test_normalize(self, raw, expected):
        assert normalize_username(raw) == expected


class TestCompare:
    """Test the comparison summary."""

    def test_empty_raises_not_found(self):
        with pytest.raises(NotFoundError):
            compare([])

    def test_summary(self, make_record):
        records = [
            make_record(url=_url(1), username="a", engagement_rate=2.0, positive=40),
            make_record(url=_url(2), username="b", engagement_rate=6.0, positive=90),
            make_record(url=_url(3), username="c", engagement_rate=1.0, positive=10),
        ]

        summary = compare(records)

        assert summary.average_engagement_rate == 3.0
        assert summary.top_performer == "@b"
        assert summary.sentiment_winner == "@b"
        assert summary.insights == ["1 out of 3 reels performed above average engagement rate"]

    def test_ties_pick_first(self, make_record):
        records = [
            make_record(url=_url(1), username="first", engagement_rate=5.0, positive=70),
            make_record(url=_url(2), username="second", engagement_rate=5.0, positive=70),
        ]

        summary = compare(records)

        assert summary.top_performer == "@first"
        assert summary.sentiment_winner == "@first"
        # Nobody is strictly above an average they all equal
        assert summary.insights == []

    def test_average_rounded_to_two_places(self, make_record):
        records = [
            make_record(url=_url(1), engagement_rate=1.0),
            make_record(url=_url(2), engagement_rate=1.0),
            make_record(url=_url(3), engagement_rate=2.0),
        ]
        assert compare(records).average_engagement_rate == 1.33


class TestUserAnalytics:
    """Test per-creator analytics."""

    def test_empty_raises_not_found(self):
        with pytest.raises(NotFoundError):
            user_analytics([])

    def test_aggregates(self, make_record):
        records = [
            make_record(
                url=_url(n),
                engagement_rate=float(n),
                overall=SentimentLabel.POSITIVE if n % 3 else SentimentLabel.NEGATIVE,
                post_date=FIXED_NOW - timedelta(days=n),
                category="travel" if n < 4 else "food",
            )
            for n in range(1, 7)
        ]

        analytics = user_analytics(records)

        assert analytics.username == "wanderlust.jane"
        assert analytics.total_reels_analyzed == 6
        assert analytics.average_engagement == 3.5
        assert analytics.total_views == 6000
        assert analytics.total_likes == 600
        assert analytics.total_comments == 60
        assert analytics.best_performing_reel.url == _url(6)
        # Newest first, five at most
        assert [r.url for r in analytics.recent_reels] == [_url(n) for n in range(1, 6)]
        assert analytics.category_breakdown == {"travel": 3, "food": 3}
        assert analytics.sentiment_trend.positive == 67
        assert analytics.sentiment_trend.negative == 33
        assert analytics.sentiment_trend.neutral == 0

    def test_profile_from_most_recent(self, make_record):
        older = make_record(url=_url(1), post_date=FIXED_NOW - timedelta(days=9), user_profile_pic="old.jpg")
        newer = make_record(url=_url(2), post_date=FIXED_NOW, user_profile_pic="new.jpg")

        assert user_analytics([older, newer]).profile_pic == "new.jpg"


class TestRecommendations:
    """Test rule-based recommendations."""

    def test_low_engagement(self, make_record):
        tips = generate_recommendations([make_record(engagement_rate=1.0)])
        assert any("improving engagement" in tip for tip in tips)

    def test_high_engagement(self, make_record):
        tips = generate_recommendations([make_record(engagement_rate=8.0)])
        assert any("Great engagement rate" in tip for tip in tips)

    def test_middle_engagement_has_no_engagement_tip(self, make_record):
        tips = generate_recommendations([make_record(engagement_rate=3.0)])
        assert not any("engagement" in tip.lower() for tip in tips)

    def test_spam_tip(self, make_record):
        comments = [ProcessedComment(id=str(i), is_spam=i < 3) for i in range(5)]
        record = make_record(comments=comments, spam_comments_count=3)

        tips = generate_recommendations([record])

        assert any("spam" in tip for tip in tips)

    def test_negative_majority_tip(self, make_record):
        records = [
            make_record(url=_url(1), overall=SentimentLabel.NEGATIVE),
            make_record(url=_url(2), overall=SentimentLabel.NEGATIVE),
            make_record(url=_url(3), overall=SentimentLabel.POSITIVE),
        ]
        assert any("negative sentiment" in tip for tip in generate_recommendations(records))

    def test_single_category_tip(self, make_record):
        records = [make_record(url=_url(n), category="food") for n in range(2)]
        assert any("food content" in tip for tip in generate_recommendations(records))

    def test_at_most_five(self, make_record):
        comments = [ProcessedComment(id=str(i), is_spam=True) for i in range(4)]
        records = [
            make_record(
                url=_url(n),
                engagement_rate=0.5,
                overall=SentimentLabel.NEGATIVE,
                category="food",
                comments=comments,
                spam_comments_count=4,
                virality_score=90,
            )
            for n in range(3)
        ]
        tips = generate_recommendations(records)
        assert len(tips) == 5
