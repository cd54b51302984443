"""
Prometheus metrics for ReelLens observability.

Usage:
    from reellens.monitoring.metrics import track_scrape_attempt

    with track_scrape_attempt("apify"):
        reel = await adapter.attempt(url)
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
from starlette.applications import Starlette
from starlette.responses import Response
from starlette.routing import Route


# =============================================================================
# Metric Definitions
# =============================================================================

# Scraping provider attempts
SCRAPE_ATTEMPTS_TOTAL = Counter(
    "reellens_scrape_attempts_total",
    "Scraping provider attempts",
    ["provider", "status"],
)

SCRAPE_LATENCY = Histogram(
    "reellens_scrape_latency_seconds",
    "Latency of a single scraping provider attempt",
    ["provider"],
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
)

# Analysis gateway
ANALYSIS_TOTAL = Counter(
    "reellens_analysis_total",
    "Reel analysis calls by outcome",
    ["outcome"],
)

ANALYSIS_LATENCY = Histogram(
    "reellens_analysis_latency_seconds",
    "Latency of the batched analysis call",
    buckets=[0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
)

# Reconciler
RECONCILE_TOTAL = Counter(
    "reellens_reconcile_total",
    "Reconcile requests by result",
    ["result"],
)

# API request metrics
API_REQUEST_DURATION = Histogram(
    "reellens_api_request_duration_seconds",
    "Duration of API requests in seconds",
    ["method", "endpoint", "status_code"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 30.0, 120.0, 300.0],
)


# =============================================================================
# Tracking Helpers
# =============================================================================


@contextmanager
def track_scrape_attempt(provider: str) -> Generator[None, None, None]:
    """
    Context manager to track one provider attempt.

    Usage:
        with track_scrape_attempt("rapidapi"):
            reel = await adapter.attempt(url)
    """
    start_time = time.perf_counter()
    status = "success"
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        SCRAPE_LATENCY.labels(provider=provider).observe(time.perf_counter() - start_time)
        SCRAPE_ATTEMPTS_TOTAL.labels(provider=provider, status=status).inc()


def record_analysis(outcome: str, duration: float) -> None:
    """Record an analysis call; outcome is "ok" or "fallback"."""
    ANALYSIS_TOTAL.labels(outcome=outcome).inc()
    ANALYSIS_LATENCY.observe(duration)


def record_reconcile(result: str) -> None:
    """Record a reconcile result; result is "cache_hit" or "refreshed"."""
    RECONCILE_TOTAL.labels(result=result).inc()


def observe_api_request(method: str, endpoint: str, status_code: int, duration: float) -> None:
    API_REQUEST_DURATION.labels(
        method=method,
        endpoint=endpoint,
        status_code=str(status_code),
    ).observe(duration)


# =============================================================================
# Metrics Endpoint
# =============================================================================


async def metrics_endpoint(request) -> Response:
    """Prometheus metrics endpoint handler."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


def get_metrics_app() -> Starlette:
    """
    Get a Starlette app for serving metrics.

    Mount this at /metrics in the main app:
        app.mount("/metrics", get_metrics_app())
    """
    return Starlette(
        routes=[
            Route("/", metrics_endpoint),
        ]
    )
