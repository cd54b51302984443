"""Instagram reel normalizer transformers.

Provides functions to transform each provider's reel payload to the unified
ScrapedReel schema. Nothing untyped crosses this boundary: counts are coerced
to non-negative ints, optional profile counts to ``int | None``, timestamps
to timezone-aware datetimes, and comments are capped at 20.
"""

from datetime import datetime, timezone
from typing import Any

from reellens.core.exceptions import CollectorError
from reellens.models.schemas import (
    MAX_COMMENTS_PER_REEL,
    RawComment,
    ScrapedReel,
    utcnow,
)


# =============================================================================
# Field Coercion
# =============================================================================


def _count(value: Any) -> int:
    """Coerce a provider count to a non-negative int (unknown -> 0)."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def _optional_count(value: Any) -> int | None:
    """Coerce an optional profile count; anything unusable stays unknown."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        count = int(value)
    except (TypeError, ValueError):
        return None
    return count if count >= 0 else None


def _duration(value: Any) -> float:
    try:
        return max(0.0, float(value or 0))
    except (TypeError, ValueError):
        return 0.0


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _parse_iso(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_epoch(value: Any) -> datetime | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return None
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def _first(*values: Any) -> Any:
    """Return the first truthy value, mirroring provider `a || b` fallbacks."""
    for value in values:
        if value:
            return value
    return None


def _flag(value: Any) -> bool:
    return value is True or (isinstance(value, str) and value.lower() == "true")


def _audio(info: Any) -> str:
    """Label for a music attribution object: original audio or "artist - song"."""
    if isinstance(info, str):
        return info.strip()
    if not isinstance(info, dict):
        return ""
    if _flag(info.get("uses_original_audio")):
        return "original audio"
    parts = [_text(info.get("artist_name")).strip(), _text(info.get("song_name")).strip()]
    return " - ".join(part for part in parts if part)


# =============================================================================
# Apify
# =============================================================================


def _transform_apify_comments(raw_comments: Any) -> list[RawComment]:
    if not isinstance(raw_comments, list):
        return []

    comments = []
    for index, raw in enumerate(raw_comments[:MAX_COMMENTS_PER_REEL]):
        raw = raw if isinstance(raw, dict) else {}
        owner = raw.get("owner") if isinstance(raw.get("owner"), dict) else {}
        comments.append(
            RawComment(
                id=str(raw.get("id") or index),
                text=_text(raw.get("text")),
                author=_text(_first(raw.get("ownerUsername"), owner.get("username"))),
                likes=_count(raw.get("likesCount")),
                timestamp=_parse_iso(raw.get("timestamp")) or utcnow(),
                replies=_count(raw.get("repliesCount")),
            )
        )
    return comments


def transform_apify_reel(raw: dict) -> ScrapedReel:
    """Transform an Apify instagram-scraper dataset item to ScrapedReel.

    Args:
        raw: First dataset item returned by the actor run.

    Returns:
        Normalized ScrapedReel instance
    """
    images = raw.get("images") if isinstance(raw.get("images"), list) else []

    return ScrapedReel(
        reel_id=str(_first(raw.get("shortCode"), raw.get("id")) or ""),
        username=_text(raw.get("ownerUsername")),
        user_profile_pic=_text(raw.get("ownerProfilePicUrl")),
        user_followers=_optional_count(raw.get("ownerFollowersCount")),
        user_following=_optional_count(raw.get("ownerFollowingCount")),
        user_posts_count=_optional_count(raw.get("ownerPostsCount")),
        caption=_text(raw.get("caption")),
        view_count=_count(_first(raw.get("videoViewCount"), raw.get("videoPlayCount"))),
        likes_count=_count(raw.get("likesCount")),
        comments_count=_count(raw.get("commentsCount")),
        shares_count=0,
        duration=_duration(raw.get("videoDuration")),
        post_date=_parse_iso(raw.get("timestamp")) or utcnow(),
        thumbnail_url=_text(_first(raw.get("displayUrl"), images[0] if images else None)),
        is_sponsored=_flag(raw.get("isSponsored")),
        audio=_audio(raw.get("musicInfo")),
        comments=_transform_apify_comments(raw.get("latestComments")),
        provider="apify",
    )


# =============================================================================
# GraphQL shape (RapidAPI and embedded page data)
# =============================================================================


def _edge_count(data: dict, key: str) -> Any:
    edge = data.get(key)
    return edge.get("count") if isinstance(edge, dict) else None


def _graphql_caption(data: dict) -> str:
    caption_edges = (data.get("edge_media_to_caption") or {}).get("edges") or []
    if caption_edges and isinstance(caption_edges[0], dict):
        return _text((caption_edges[0].get("node") or {}).get("text"))
    return ""


def _transform_graphql_comments(edges: Any) -> list[RawComment]:
    if not isinstance(edges, list):
        return []

    comments = []
    for index, edge in enumerate(edges[:MAX_COMMENTS_PER_REEL]):
        node = (edge or {}).get("node") if isinstance(edge, dict) else None
        node = node if isinstance(node, dict) else {}
        owner = node.get("owner") if isinstance(node.get("owner"), dict) else {}
        comments.append(
            RawComment(
                id=str(node.get("id") or index),
                text=_text(node.get("text")),
                author=_text(owner.get("username")),
                likes=_count(_edge_count(node, "edge_liked_by")),
                timestamp=_parse_epoch(node.get("created_at")) or utcnow(),
                replies=_count(_edge_count(node, "edge_threaded_comments")),
            )
        )
    return comments


def _graphql_post_date(data: dict) -> datetime:
    return (
        _parse_epoch(data.get("taken_at_timestamp"))
        or _parse_iso(data.get("timestamp"))
        or utcnow()
    )


def transform_rapidapi_reel(raw: dict) -> ScrapedReel:
    """Transform a RapidAPI post_info payload to ScrapedReel.

    RapidAPI mostly mirrors Instagram's GraphQL media shape but sometimes
    flattens fields (``username``, ``caption``, ``likesCount``); both are read.

    Args:
        raw: The ``data`` object of the post_info response.

    Returns:
        Normalized ScrapedReel instance
    """
    owner = raw.get("owner") if isinstance(raw.get("owner"), dict) else {}
    comment_edge = raw.get("edge_media_to_comment") or {}

    return ScrapedReel(
        reel_id=str(_first(raw.get("shortcode"), raw.get("id")) or ""),
        username=_text(_first(owner.get("username"), raw.get("username"))),
        user_profile_pic=_text(_first(owner.get("profile_pic_url"), raw.get("profilePicUrl"))),
        user_followers=_optional_count(_edge_count(owner, "edge_followed_by")),
        user_following=_optional_count(_edge_count(owner, "edge_follow")),
        user_posts_count=None,
        caption=_graphql_caption(raw) or _text(raw.get("caption")),
        view_count=_count(_first(raw.get("video_view_count"), raw.get("playCount"))),
        likes_count=_count(_first(_edge_count(raw, "edge_media_preview_like"), raw.get("likesCount"))),
        comments_count=_count(_first(comment_edge.get("count"), raw.get("commentsCount"))),
        shares_count=0,
        duration=_duration(_first(raw.get("video_duration"), raw.get("videoDuration"))),
        post_date=_graphql_post_date(raw),
        thumbnail_url=_text(_first(raw.get("display_url"), raw.get("thumbnailUrl"))),
        is_sponsored=_flag(raw.get("is_paid_partnership")),
        audio=_audio(raw.get("clips_music_attribution_info")),
        comments=_transform_graphql_comments(comment_edge.get("edges")),
        provider="rapidapi",
    )


def transform_shared_data(shared: dict) -> ScrapedReel:
    """Transform ``window._sharedData`` from a reel page to ScrapedReel.

    Args:
        shared: Parsed ``window._sharedData`` object.

    Returns:
        Normalized ScrapedReel instance

    Raises:
        CollectorError: If the page carries no post media.
    """
    try:
        media = shared["entry_data"]["PostPage"][0]["graphql"]["shortcode_media"]
    except (KeyError, IndexError, TypeError):
        media = None

    if not isinstance(media, dict):
        raise CollectorError("html", "Could not find post data")

    owner = media.get("owner") if isinstance(media.get("owner"), dict) else {}
    comment_edge = media.get("edge_media_to_comment") or {}

    return ScrapedReel(
        reel_id=str(_first(media.get("shortcode"), media.get("id")) or ""),
        username=_text(owner.get("username")),
        user_profile_pic=_text(owner.get("profile_pic_url")),
        user_followers=_optional_count(_edge_count(owner, "edge_followed_by")),
        user_following=_optional_count(_edge_count(owner, "edge_follow")),
        user_posts_count=None,
        caption=_graphql_caption(media),
        view_count=_count(_first(media.get("video_view_count"), media.get("playCount"))),
        likes_count=_count(_edge_count(media, "edge_media_preview_like")),
        comments_count=_count(comment_edge.get("count")),
        shares_count=0,
        duration=_duration(_first(media.get("video_duration"), media.get("videoDuration"))),
        post_date=_graphql_post_date(media),
        thumbnail_url=_text(_first(media.get("display_url"), media.get("thumbnailUrl"))),
        is_sponsored=_flag(media.get("is_paid_partnership")),
        audio=_audio(media.get("clips_music_attribution_info")),
        comments=_transform_graphql_comments(comment_edge.get("edges")),
        provider="html",
    )
