"""Prometheus metrics for scraping, analysis, reconciliation and the API."""

from reellens.monitoring.metrics import (
    get_metrics_app,
    observe_api_request,
    record_analysis,
    record_reconcile,
    track_scrape_attempt,
)

__all__ = [
    "get_metrics_app",
    "observe_api_request",
    "record_analysis",
    "record_reconcile",
    "track_scrape_attempt",
]
