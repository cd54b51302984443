"""
Reel metrics engine.

Pure, deterministic functions over scraped counts and text. No I/O; the only
input beyond the arguments is the clock, and every time-dependent function
accepts ``now`` explicitly.
"""

import math
import re
from collections import Counter
from datetime import datetime, timezone
from typing import Iterable, Sequence

from reellens.models.schemas import (
    HashtagCount,
    ProcessedComment,
    SentimentLabel,
    SentimentResult,
    WordCount,
    utcnow,
)

# Word cloud tokens: ASCII alphabetic runs of 3+ letters bounded by word edges.
WORD_PATTERN = re.compile(r"\b[a-z]{3,}\b", re.ASCII)

HASHTAG_PATTERN = re.compile(r"#[A-Za-z0-9_]+")

WORD_CLOUD_LIMIT = 20
TOP_COMMENTS_LIMIT = 10

STOP_WORDS: frozenset[str] = frozenset({
    "the", "and", "for", "are", "but", "not", "you", "all", "can", "had",
    "her", "was", "one", "our", "out", "day", "get", "use", "man", "new",
    "now", "way", "may", "say", "each", "which", "their", "time", "will",
    "about", "if", "up", "many", "then", "them", "these", "so", "some",
    "would", "make", "like", "him", "has", "two", "more", "very", "what",
    "know", "just", "first", "into", "over", "think", "also", "your",
    "work", "life", "only", "still", "should", "after", "being", "made",
    "before", "here", "through", "when", "where", "how", "who", "oil", "sit",
})

SECONDS_PER_DAY = 86400.0


def round_half_up(value: float) -> int:
    """Round to the nearest int with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def engagement_rate(likes: int, comments: int, views: int) -> float:
    """Likes plus comments as a percentage of views; 0 when there are no views."""
    if views <= 0:
        return 0.0
    return (likes + comments) / views * 100


def days_since(post_date: datetime, now: datetime | None = None) -> float:
    """Fractional days elapsed since ``post_date``, floored at 0."""
    now = now or utcnow()
    if post_date.tzinfo is None:
        post_date = post_date.replace(tzinfo=timezone.utc)
    return max(0.0, (now - post_date).total_seconds() / SECONDS_PER_DAY)


def virality_score(
    views: int,
    likes: int,
    comments: int,
    shares: int,
    post_date: datetime,
    now: datetime | None = None,
) -> int:
    """Weighted engagement with time decay.

    Comments count double and shares triple. The decay factor
    ``1 / (1 + days * 0.1)`` has a floor of 0.1, so old reels keep a tenth
    of their weighted engagement.
    """
    weighted = (likes + 2 * comments + 3 * shares) / max(views, 1)
    decay = max(0.1, 1 / (1 + days_since(post_date, now) * 0.1))
    return max(0, round_half_up(weighted * decay * 100))


def word_cloud(texts: Iterable[str], limit: int = WORD_CLOUD_LIMIT) -> list[WordCount]:
    """Most frequent non-stop-words across ``texts``.

    Ties keep first-seen order: Counter preserves insertion order and
    ``sorted`` is stable.
    """
    counts: Counter[str] = Counter()
    for text in texts:
        for word in WORD_PATTERN.findall(text.lower()):
            if word not in STOP_WORDS:
                counts[word] += 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [WordCount(word=word, count=count) for word, count in ranked[:limit]]


def extract_hashtags(caption: str) -> list[HashtagCount]:
    """Case-insensitive hashtag counts, most frequent first (not capped)."""
    counts = Counter(tag.lower() for tag in HASHTAG_PATTERN.findall(caption or ""))
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [HashtagCount(tag=tag, count=count) for tag, count in ranked]


def overall_sentiment(caption: SentimentResult, comments: SentimentResult) -> SentimentResult:
    """Blend caption and comment sentiment.

    Percentages are averaged. The label follows the sign of the *sum* of the
    two scores while the score itself is their *average*.
    """
    score_sum = caption.score + comments.score
    if score_sum > 0:
        label = SentimentLabel.POSITIVE
    elif score_sum < 0:
        label = SentimentLabel.NEGATIVE
    else:
        label = SentimentLabel.NEUTRAL

    return SentimentResult(
        positive=round_half_up((caption.positive + comments.positive) / 2),
        negative=round_half_up((caption.negative + comments.negative) / 2),
        neutral=round_half_up((caption.neutral + comments.neutral) / 2),
        overall=label,
        score=score_sum / 2,
    )


def top_comments(
    comments: Sequence[ProcessedComment],
    limit: int = TOP_COMMENTS_LIMIT,
) -> list[ProcessedComment]:
    """Most-liked comments first; equal likes keep their scraped order."""
    return sorted(comments, key=lambda c: c.likes, reverse=True)[:limit]


def count_spam(comments: Sequence[ProcessedComment]) -> int:
    return sum(1 for comment in comments if comment.is_spam)
