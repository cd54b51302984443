"""Health check endpoints for the ReelLens API.

Reports which external components are configured and whether the record
store is reachable. Scraping and model providers are not called.
"""

import time
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import APIRouter, Depends

from reellens import __version__
from reellens.api.models import HealthCheckResponse, HealthStatus
from reellens.core.container import DependencyContainer, get_container
from reellens.core.exceptions import InitializationError

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])

# Track server start time for uptime calculation
_server_start_time: Optional[float] = None


def set_server_start_time() -> None:
    """Set the server start time. Called on application startup."""
    global _server_start_time
    _server_start_time = time.time()


def get_uptime_seconds() -> Optional[float]:
    """Get server uptime in seconds."""
    if _server_start_time is None:
        return None
    return time.time() - _server_start_time


async def check_store_health(container: DependencyContainer) -> HealthStatus:
    """Check that the record store can be built and queried."""
    start_time = time.time()
    try:
        store = container.store
        healthy = await store.health_check()
    except InitializationError as e:
        logger.error("store_health_check_failed", error=str(e))
        return HealthStatus(status="unhealthy", message=f"Store not available: {str(e)[:100]}")

    latency = (time.time() - start_time) * 1000
    if not healthy:
        return HealthStatus(
            status="unhealthy",
            latency_ms=round(latency, 2),
            message=f"{store.name} store query failed",
        )
    return HealthStatus(
        status="healthy",
        latency_ms=round(latency, 2),
        message=f"Connected to {store.name} store",
    )


def _configured(name: str, configured: bool, required: bool) -> HealthStatus:
    if configured:
        return HealthStatus(status="healthy", message=f"{name} configured")
    if required:
        return HealthStatus(status="unhealthy", message=f"{name} credentials missing")
    return HealthStatus(status="not_configured", message=f"{name} credentials not set")


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health Check",
    description="Check the health status of the API and its dependencies.",
)
async def health_check(
    container: DependencyContainer = Depends(get_container),
) -> HealthCheckResponse:
    """
    Report component status.

    The analysis model key and the store are required; the Apify and
    RapidAPI providers are optional and only shrink the fallback chain.
    """
    configured = container.component_status()

    services = {
        "store": await check_store_health(container),
        "anthropic": _configured("Anthropic", configured["anthropic"], required=True),
        "apify": _configured("Apify", configured["apify"], required=False),
        "rapidapi": _configured("RapidAPI", configured["rapidapi"], required=False),
    }

    statuses = [s.status for s in services.values()]
    if any(s == "unhealthy" for s in statuses):
        overall_status = "unhealthy"
    elif all(s == "healthy" for s in statuses):
        overall_status = "healthy"
    else:
        overall_status = "degraded"

    providers: list[str] = []
    try:
        providers = container.scraper.provider_names
    except InitializationError as e:
        logger.error("scraper_health_check_failed", error=str(e))

    return HealthCheckResponse(
        status=overall_status,
        version=__version__,
        timestamp=datetime.now(timezone.utc),
        services=services,
        scrape_providers=providers,
        uptime_seconds=get_uptime_seconds(),
    )


@router.get(
    "/health/live",
    summary="Liveness Check",
    description="Simple liveness check for container orchestration.",
)
async def liveness() -> dict:
    """Returns 200 if the service is alive."""
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}
