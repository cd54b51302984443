"""
Reel Analysis Gateway.

Uses Claude to classify caption and comment sentiment, flag spam comments,
categorize the reel and draft strategic insights, all in one batched request
per reel. Model output is treated as untrusted: it is parsed leniently,
validated field by field, and replaced wholesale by a deterministic fallback
whenever the call or the parse fails. This module never raises to its caller.

Standalone usage:
    from reellens.analysis.sentiment import ReelAnalyzer

    analyzer = ReelAnalyzer(api_key="sk-ant-...")
    result = await analyzer.analyze(reel, engagement_rate=4.2)
"""

import json
import math
import time
from typing import Any, Optional

import anthropic
import structlog

from reellens.analysis.metrics import round_half_up
from reellens.analysis.prompts import SYSTEM_PROMPT, build_analysis_prompt
from reellens.core.exceptions import ConfigurationError
from reellens.models.schemas import (
    CONTENT_CATEGORIES,
    DEFAULT_CATEGORY,
    AnalysisResult,
    AudienceInsights,
    ContentStrategyInsights,
    PerformanceInsights,
    ProcessedComment,
    RawComment,
    ScrapedReel,
    SentimentLabel,
    SentimentResult,
    StrategicInsights,
    ViralPotential,
)
from reellens.monitoring.metrics import record_analysis

logger = structlog.get_logger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnalysisParseError(ValueError):
    """Model output could not be turned into an analysis."""


# =============================================================================
# Response Parsing
# =============================================================================


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` span in ``text``.

    Braces inside JSON string literals are ignored, so commentary before or
    after the object (or a Markdown code fence around it) does not matter.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for position in range(start, len(text)):
            char = text[position]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:position + 1]
        # Unbalanced from this brace; try the next opening brace.
        start = text.find("{", start + 1)
    return None


def parse_model_response(text: str) -> dict[str, Any]:
    """Parse the model's text into a JSON object.

    Raises:
        AnalysisParseError: If no JSON object can be recovered.
    """
    if not text or not text.strip():
        raise AnalysisParseError("Empty response from model")

    span = extract_json_object(text)
    if span is None:
        raise AnalysisParseError(f"No JSON found in response: {text[:200]}")

    try:
        parsed = json.loads(span)
    except json.JSONDecodeError as e:
        raise AnalysisParseError(f"Invalid JSON in response: {e}") from e

    if not isinstance(parsed, dict):
        raise AnalysisParseError("Response JSON is not an object")
    return parsed


# =============================================================================
# Field Validation
# =============================================================================


def _number(value: Any) -> float:
    """Numeric value of a model field; anything unusable is 0."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _percentage(value: Any) -> int:
    return round_half_up(max(0.0, min(100.0, _number(value))))


def validate_label(value: Any) -> SentimentLabel:
    try:
        return SentimentLabel(value)
    except ValueError:
        return SentimentLabel.NEUTRAL


def validate_sentiment(raw: Any) -> SentimentResult:
    """Clamp each percentage to [0, 100] and the score to [-1, 1].

    Percentages are clamped independently and never renormalized.
    """
    raw = raw if isinstance(raw, dict) else {}
    return SentimentResult(
        positive=_percentage(raw.get("positive")),
        negative=_percentage(raw.get("negative")),
        neutral=_percentage(raw.get("neutral")),
        overall=validate_label(raw.get("overall")),
        score=max(-1.0, min(1.0, _number(raw.get("score")))),
    )


def validate_category(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in CONTENT_CATEGORIES:
        return value.strip().lower()
    return DEFAULT_CATEGORY


def match_comments(
    comments: list[RawComment],
    analyses: Any,
) -> list[ProcessedComment]:
    """Attach model labels to comments by 1-based position.

    The first analysis entry carrying a given index wins. Comments without a
    matching entry are neutral and not spam.
    """
    by_index: dict[int, dict] = {}
    if isinstance(analyses, list):
        for entry in analyses:
            if not isinstance(entry, dict):
                continue
            index = entry.get("index")
            if isinstance(index, bool) or not isinstance(index, (int, float)):
                continue
            if float(index).is_integer():
                by_index.setdefault(int(index), entry)

    processed = []
    for position, comment in enumerate(comments, start=1):
        entry = by_index.get(position, {})
        processed.append(
            ProcessedComment.from_raw(
                comment,
                sentiment=validate_label(entry.get("sentiment")),
                is_spam=bool(entry.get("isSpam")),
            )
        )
    return processed


def _string_list(value: Any, default: list[str]) -> list[str]:
    if not isinstance(value, list):
        return list(default)
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _demographics(value: Any, default: dict[str, float]) -> dict[str, float]:
    if not isinstance(value, dict):
        return dict(default)
    return {
        str(bucket): max(0.0, min(100.0, _number(share)))
        for bucket, share in value.items()
    }


def validate_insights(raw: Any) -> StrategicInsights:
    """Coerce the model's insights; each missing section takes its default."""
    default = StrategicInsights.default()
    if not isinstance(raw, dict):
        return default

    strategy = raw.get("contentStrategy")
    if isinstance(strategy, dict):
        d = default.content_strategy
        content_strategy = ContentStrategyInsights(
            strengths=_string_list(strategy.get("strengths"), d.strengths),
            weaknesses=_string_list(strategy.get("weaknesses"), d.weaknesses),
            opportunities=_string_list(strategy.get("opportunities"), d.opportunities),
            recommendations=_string_list(strategy.get("recommendations"), d.recommendations),
        )
    else:
        content_strategy = default.content_strategy

    audience = raw.get("audienceInsights")
    if isinstance(audience, dict):
        d = default.audience_insights
        audience_insights = AudienceInsights(
            demographics=_demographics(audience.get("demographics"), d.demographics),
            engagement_patterns=_string_list(audience.get("engagementPatterns"), d.engagement_patterns),
            behavior_insights=_string_list(audience.get("behaviorInsights"), d.behavior_insights),
        )
    else:
        audience_insights = default.audience_insights

    performance = raw.get("performanceAnalysis")
    if isinstance(performance, dict):
        d = default.performance_analysis
        try:
            viral_potential = ViralPotential(str(performance.get("viralPotential", "")).lower())
        except ValueError:
            viral_potential = ViralPotential.MEDIUM
        performance_analysis = PerformanceInsights(
            viral_potential=viral_potential,
            content_optimization=_string_list(performance.get("contentOptimization"), d.content_optimization),
            timing_recommendations=_string_list(performance.get("timingRecommendations"), d.timing_recommendations),
        )
    else:
        performance_analysis = default.performance_analysis

    return StrategicInsights(
        content_strategy=content_strategy,
        audience_insights=audience_insights,
        performance_analysis=performance_analysis,
    )


def build_analysis(payload: dict[str, Any], reel: ScrapedReel) -> AnalysisResult:
    """Turn a parsed model payload into a validated AnalysisResult.

    Raises:
        AnalysisParseError: If a sentiment section the reel needs is absent.
    """
    if not isinstance(payload.get("captionSentiment"), dict):
        raise AnalysisParseError("Response is missing captionSentiment")

    if reel.comments:
        if not isinstance(payload.get("commentsSentiment"), dict):
            raise AnalysisParseError("Response is missing commentsSentiment")
        comments_sentiment = validate_sentiment(payload["commentsSentiment"])
    else:
        comments_sentiment = SentimentResult.neutral_default()

    return AnalysisResult(
        caption_sentiment=validate_sentiment(payload.get("captionSentiment")),
        comments_sentiment=comments_sentiment,
        processed_comments=match_comments(reel.comments, payload.get("comments")),
        category=validate_category(payload.get("category")),
        strategic_insights=validate_insights(payload.get("strategicInsights")),
    )


def fallback_analysis(reel: ScrapedReel) -> AnalysisResult:
    """Fully-specified analysis used whenever the model call cannot be used."""
    return AnalysisResult(
        caption_sentiment=SentimentResult.neutral_default(),
        comments_sentiment=SentimentResult.neutral_default(),
        processed_comments=[ProcessedComment.from_raw(comment) for comment in reel.comments],
        category=DEFAULT_CATEGORY,
        strategic_insights=StrategicInsights.default(),
        is_fallback=True,
    )


# =============================================================================
# Analyzer
# =============================================================================


class ReelAnalyzer:
    """
    Batched sentiment, spam, category and insights analysis using Claude.

    Follows the same Anthropic client pattern as the rest of the codebase,
    using the async client so the event loop is not blocked.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4096,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        """
        Args:
            api_key: Anthropic API key.
            model: Model name for the analysis call.
            max_tokens: Output token budget.
            client: Pre-built client (tests).

        Raises:
            ConfigurationError: If no API key is provided.
        """
        if client is None and not api_key:
            raise ConfigurationError(
                "Anthropic API key is required for reel analysis",
                config_key="ANTHROPIC_API_KEY",
            )
        self.client = client or anthropic.AsyncAnthropic(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens

    async def _complete(self, prompt: str) -> str:
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )

    async def analyze(self, reel: ScrapedReel, engagement_rate: float = 0.0) -> AnalysisResult:
        """
        Analyze a reel with one model call.

        Args:
            reel: Scraped reel with up to 20 comments.
            engagement_rate: Engagement rate, included in the prompt.

        Returns:
            Validated AnalysisResult, or the fallback analysis on any failure.
        """
        start_time = time.perf_counter()
        prompt = build_analysis_prompt(reel, engagement_rate)

        try:
            text = await self._complete(prompt)
            result = build_analysis(parse_model_response(text), reel)
        except Exception as e:
            logger.warning(
                "analysis_fallback_used",
                reel_id=reel.reel_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            record_analysis("fallback", time.perf_counter() - start_time)
            return fallback_analysis(reel)

        record_analysis("ok", time.perf_counter() - start_time)
        logger.info(
            "analysis_completed",
            reel_id=reel.reel_id,
            category=result.category,
            comments=len(result.processed_comments),
        )
        return result
