"""Prompt text for the batched reel analysis call."""

import json

from reellens.models.schemas import CONTENT_CATEGORIES, ScrapedReel

SYSTEM_PROMPT = """You are a social media analyst. You analyze a single Instagram reel:
its caption, its comments and its engagement numbers. You answer with one JSON
object and nothing else. No markdown, no explanation."""

RESPONSE_FORMAT = """{
  "captionSentiment": {
    "positive": <percentage 0-100>,
    "negative": <percentage 0-100>,
    "neutral": <percentage 0-100>,
    "overall": "<positive|negative|neutral>",
    "score": <number between -1 and 1>
  },
  "commentsSentiment": {
    "positive": <percentage 0-100>,
    "negative": <percentage 0-100>,
    "neutral": <percentage 0-100>,
    "overall": "<positive|negative|neutral>",
    "score": <number between -1 and 1>
  },
  "comments": [
    {"index": 1, "sentiment": "<positive|negative|neutral>", "isSpam": <true|false>}
  ],
  "category": "<CATEGORIES>",
  "strategicInsights": {
    "contentStrategy": {
      "strengths": ["..."],
      "weaknesses": ["..."],
      "opportunities": ["..."],
      "recommendations": ["..."]
    },
    "audienceInsights": {
      "demographics": {"18-24": <percent>, "25-34": <percent>, "35-44": <percent>, "45+": <percent>},
      "engagementPatterns": ["..."],
      "behaviorInsights": ["..."]
    },
    "performanceAnalysis": {
      "viralPotential": "<high|medium|low>",
      "contentOptimization": ["..."],
      "timingRecommendations": ["..."]
    }
  }
}"""

RULES = """Rules:
- captionSentiment: analyze only the caption text
- commentsSentiment: overall sentiment across all comments (all neutral=100 if there are none)
- comments: one entry per numbered comment, same order, "index" is the comment's number
- isSpam: true if the comment has excessive emojis, repetitive text, promotional content, nonsensical text, or bot-like patterns
- category: classify the reel into exactly one of the listed categories
- Percentages should add up to 100
- score: 0 to 1 for positive, -1 to 0 for negative, 0 for neutral
- strategicInsights: concrete, specific advice grounded in the metrics above
- Only return the JSON object, no other text"""


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def build_analysis_prompt(reel: ScrapedReel, engagement_rate: float) -> str:
    """Build the single user message sent for a reel.

    Args:
        reel: Scraped reel; its comments are numbered from 1.
        engagement_rate: Engagement rate used to ground the insights.
    """
    comment_lines = [
        f"{index}. {_quote(comment.text)}"
        for index, comment in enumerate(reel.comments, start=1)
    ]
    followers = reel.user_followers if reel.user_followers is not None else "unknown"

    sections = [
        "Analyze the following Instagram reel comprehensively. Provide sentiment analysis "
        "for the caption, overall comments sentiment, individual comment analysis, content "
        "categorization and strategic insights.",
        f"CAPTION: {_quote(reel.caption)}",
        f"COMMENTS ({len(comment_lines)} total):\n" + ("\n".join(comment_lines) or "(none)"),
        "METRICS:\n"
        f"- Creator: @{reel.username or 'unknown'} ({followers} followers)\n"
        f"- Views: {reel.view_count}\n"
        f"- Likes: {reel.likes_count}\n"
        f"- Comments: {reel.comments_count}\n"
        f"- Duration: {reel.duration:g}s\n"
        f"- Sponsored: {'yes' if reel.is_sponsored else 'no'}\n"
        f"- Audio: {reel.audio or 'unknown'}\n"
        f"- Engagement rate: {engagement_rate:.2f}%",
        "Return only valid JSON in this exact format:\n"
        + RESPONSE_FORMAT.replace("<CATEGORIES>", "|".join(sorted(CONTENT_CATEGORIES))),
        RULES,
    ]
    return "\n\n".join(sections)
