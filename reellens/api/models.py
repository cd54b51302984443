"""Pydantic models for API requests and responses.

Every response is wrapped in the same envelope: ``{"success": true, "data": ...}``
on success and ``{"success": false, "error": ..., "code": ...}`` on failure.
"""

import re
from datetime import datetime
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

from reellens.models.schemas import ComparisonResult, ReelRecord, UserAnalytics

REEL_URL_MARKER = "instagram.com/reel/"

USERNAME_PATTERN = re.compile(r"^@?[A-Za-z0-9._]{1,30}$")

MIN_COMPARE_URLS = 2
MAX_COMPARE_URLS = 5


def validate_reel_url(url: str) -> str:
    """Accept only absolute http(s) URLs pointing at an Instagram reel.

    Raises:
        ValueError: If the URL is malformed or is not a reel URL.
    """
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Must be a valid URL")
    if REEL_URL_MARKER not in url:
        raise ValueError("Must be a valid Instagram Reel URL")
    return url


# =============================================================================
# Request Models
# =============================================================================


class AnalyzeRequest(BaseModel):
    """Request model for analyzing a single reel."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(
        ...,
        description="Instagram reel URL",
        json_schema_extra={"example": "https://www.instagram.com/reel/DFMgjRsS_Xw/"},
    )
    force_refresh: bool = Field(
        default=False,
        alias="forceRefresh",
        description="Re-scrape even if a fresh record is stored",
    )

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_reel_url(value)


class CompareRequest(BaseModel):
    """Request model for comparing already-analyzed reels."""

    urls: list[str] = Field(
        ...,
        min_length=MIN_COMPARE_URLS,
        max_length=MAX_COMPARE_URLS,
        description="Two to five reel URLs",
    )

    @field_validator("urls")
    @classmethod
    def check_urls(cls, value: list[str]) -> list[str]:
        return [validate_reel_url(url) for url in value]


# =============================================================================
# Response Envelopes
# =============================================================================


class AnalyzeResponse(BaseModel):
    success: Literal[True] = True
    data: ReelRecord


class CompareResponse(BaseModel):
    success: Literal[True] = True
    data: ComparisonResult


class UserAnalyticsResponse(BaseModel):
    success: Literal[True] = True
    data: UserAnalytics


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: Literal[False] = False
    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    detail: Optional[str] = Field(None, description="Underlying error (debug mode only)")


# =============================================================================
# Health Models
# =============================================================================


class HealthStatus(BaseModel):
    """Individual component health status."""

    status: Literal["healthy", "unhealthy", "degraded", "not_configured"] = Field(
        ..., description="Component status"
    )
    latency_ms: Optional[float] = Field(None, description="Check latency in milliseconds")
    message: Optional[str] = Field(None, description="Additional status message")


class HealthCheckResponse(BaseModel):
    """Response model for health check endpoint."""

    status: Literal["healthy", "unhealthy", "degraded"] = Field(
        ..., description="Overall system status"
    )
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(..., description="Check timestamp")
    services: dict[str, HealthStatus] = Field(
        default_factory=dict,
        description="Individual component statuses",
    )
    scrape_providers: list[str] = Field(
        default_factory=list,
        description="Scraping providers in fallback order",
    )
    uptime_seconds: Optional[float] = Field(None, description="Server uptime in seconds")
