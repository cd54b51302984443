"""Unit tests for provider payload normalization."""

from datetime import datetime, timezone

import pytest

from reellens.collectors.instagram.html import extract_shared_data
from reellens.collectors.instagram.normalizer import (
    transform_apify_reel,
    transform_rapidapi_reel,
    transform_shared_data,
)
from reellens.core.exceptions import CollectorError


class TestApifyTransform:
    """Test Apify dataset item normalization."""

    def test_maps_core_fields(self, apify_item):
        reel = transform_apify_reel(apify_item)

        assert reel.reel_id == "DFMgjRsS_Xw"
        assert reel.username == "wanderlust.jane"
        assert reel.user_followers == 48200
        assert reel.user_following == 512
        assert reel.user_posts_count == 730
        assert reel.view_count == 120000
        assert reel.likes_count == 9400
        assert reel.comments_count == 310
        assert reel.duration == pytest.approx(14.6)
        assert reel.post_date == datetime(2025, 3, 8, 6, 30, tzinfo=timezone.utc)
        assert reel.thumbnail_url == "https://cdn.example.com/thumb.jpg"
        assert reel.provider == "apify"

    def test_sponsorship_and_audio(self, apify_item):
        apify_item["isSponsored"] = True
        apify_item["musicInfo"] = {"artist_name": "Kygo", "song_name": "Stole the Show", "uses_original_audio": False}

        reel = transform_apify_reel(apify_item)

        assert reel.is_sponsored is True
        assert reel.audio == "Kygo - Stole the Show"

    def test_original_audio_and_unsponsored_default(self, apify_item):
        apify_item["musicInfo"] = {"artist_name": "wanderlust.jane", "uses_original_audio": True}

        reel = transform_apify_reel(apify_item)

        assert reel.is_sponsored is False
        assert reel.audio == "original audio"

    def test_comments(self, apify_item):
        reel = transform_apify_reel(apify_item)

        assert [c.id for c in reel.comments] == ["c1", "c2"]
        assert reel.comments[0].replies == 3
        assert reel.comments[1].author == "bot_account"
        assert reel.comments[1].replies == 0

    def test_comments_capped_at_twenty(self, apify_item):
        apify_item["latestComments"] = [{"text": f"comment {i}"} for i in range(35)]

        reel = transform_apify_reel(apify_item)

        assert len(reel.comments) == 20
        # Missing ids fall back to the position
        assert reel.comments[3].id == "3"

    def test_missing_profile_counts_stay_unknown(self, apify_item):
        for key in ("ownerFollowersCount", "ownerFollowingCount", "ownerPostsCount"):
            apify_item.pop(key)

        reel = transform_apify_reel(apify_item)

        assert reel.user_followers is None
        assert reel.user_following is None
        assert reel.user_posts_count is None

    def test_missing_counts_default_to_zero(self):
        reel = transform_apify_reel({"shortCode": "abc"})

        assert reel.view_count == 0
        assert reel.likes_count == 0
        assert reel.comments_count == 0
        assert reel.duration == 0
        assert reel.username == ""
        assert reel.caption == ""
        assert reel.comments == []

    def test_play_count_used_when_view_count_missing(self, apify_item):
        apify_item.pop("videoViewCount")
        assert transform_apify_reel(apify_item).view_count == 150000

    def test_negative_and_garbage_counts(self, apify_item):
        apify_item["likesCount"] = -5
        apify_item["commentsCount"] = "lots"

        reel = transform_apify_reel(apify_item)

        assert reel.likes_count == 0
        assert reel.comments_count == 0


class TestGraphQLTransforms:
    """Test RapidAPI and page-data normalization."""

    def test_rapidapi(self, rapidapi_data):
        reel = transform_rapidapi_reel(rapidapi_data)

        assert reel.reel_id == "DFMgjRsS_Xw"
        assert reel.username == "wanderlust.jane"
        assert reel.user_followers == 48200
        assert reel.user_posts_count is None
        assert reel.caption == "Sunrise over Santorini #travel"
        assert reel.likes_count == 9400
        assert reel.comments_count == 310
        assert reel.post_date == datetime.fromtimestamp(1741415400, tz=timezone.utc)
        assert reel.comments[0].likes == 5
        assert reel.provider == "rapidapi"

    def test_rapidapi_flat_fallbacks(self):
        reel = transform_rapidapi_reel({
            "id": "987",
            "username": "flat_user",
            "caption": "flat caption",
            "likesCount": 12,
            "commentsCount": 3,
            "playCount": 400,
        })

        assert reel.reel_id == "987"
        assert reel.username == "flat_user"
        assert reel.is_sponsored is False
        assert reel.audio == ""
        assert reel.caption == "flat caption"
        assert reel.likes_count == 12
        assert reel.view_count == 400

    def test_shared_data(self, shared_data):
        reel = transform_shared_data(shared_data)

        assert reel.username == "wanderlust.jane"
        assert reel.provider == "html"

    def test_graphql_partnership_and_music(self, rapidapi_data):
        rapidapi_data["is_paid_partnership"] = True
        rapidapi_data["clips_music_attribution_info"] = {"artist_name": "Kygo", "song_name": "Firestone"}

        reel = transform_rapidapi_reel(rapidapi_data)

        assert reel.is_sponsored is True
        assert reel.audio == "Kygo - Firestone"

    def test_shared_data_without_post(self):
        with pytest.raises(CollectorError, match="Could not find post data"):
            transform_shared_data({"entry_data": {}})


class TestExtractSharedData:
    """Test locating window._sharedData in a page."""

    def test_finds_blob_in_script_tag(self):
        html = (
            "<html><head><script>var x = 1;</script>"
            '<script type="text/javascript">window._sharedData = {"entry_data": {"a": 1}};</script>'
            "</head></html>"
        )
        assert extract_shared_data(html) == {"entry_data": {"a": 1}}

    def test_missing_blob(self):
        assert extract_shared_data("<html><script>var y = 2;</script></html>") is None

    def test_malformed_blob(self):
        html = "<script>window._sharedData = {not json};</script>"
        assert extract_shared_data(html) is None
