"""ReelLens API - Main FastAPI Application.

This module provides the main FastAPI application for ReelLens.
It includes:
- CORS middleware configuration
- Request timing middleware feeding Prometheus
- Uniform ``{success, error, code}`` error envelopes
- Reel analysis, comparison and creator analytics endpoints under /api
- Health and metrics endpoints

Usage:
    # Run with uvicorn
    uvicorn reellens.api.main:app --reload

    # Or run directly
    python -m reellens.api.main
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from reellens import __version__
from reellens.api.models import ErrorResponse
from reellens.api.routes.analyze import router as analyze_router
from reellens.api.routes.compare import router as compare_router
from reellens.api.routes.health import router as health_router, set_server_start_time
from reellens.api.routes.users import router as users_router
from reellens.config.settings import get_settings
from reellens.core.container import get_container, shutdown_container
from reellens.core.exceptions import InitializationError, ReelLensError
from reellens.core.logging_config import configure_logging
from reellens.monitoring.metrics import get_metrics_app, observe_api_request

logger = structlog.get_logger(__name__)

# API metadata for OpenAPI documentation
API_TITLE = "ReelLens API"
API_DESCRIPTION = """
## Instagram Reel Analytics

ReelLens scrapes a single Instagram reel, runs sentiment, spam and category
analysis over its caption and comments, derives engagement metrics, and stores
the result for comparison and per-creator analytics.

### Getting Started

1. **Analyze a reel**: `POST /api/analyze` with `{"url": "https://www.instagram.com/reel/..."}`
2. **Compare reels**: `POST /api/compare` with two to five analyzed reel URLs
3. **Creator analytics**: `GET /api/user/{username}`
"""


# =============================================================================
# Request Timing Middleware
# =============================================================================


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Record the duration of every request in Prometheus."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        # Use the route template to keep label cardinality bounded
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        observe_api_request(request.method, endpoint, response.status_code, duration)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: Build the dependency container
    - Shutdown: Close provider clients
    """
    logger.info("application_starting")
    set_server_start_time()

    container = get_container()
    try:
        await container.initialize()
    except InitializationError as e:
        # Keep serving health checks; analysis requests will report the error
        logger.error("container_initialization_failed", error=str(e))

    logger.info("application_started")

    yield

    logger.info("application_stopping")
    await shutdown_container()
    logger.info("application_stopped")


_settings = get_settings()
configure_logging(level=_settings.log_level, json_logs=_settings.log_json)

# Create FastAPI application
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=[
        {
            "name": "Health",
            "description": "System health and status endpoints",
        },
        {
            "name": "Analysis",
            "description": "Analyze reels and compare analyzed reels",
        },
        {
            "name": "Users",
            "description": "Per-creator analytics across analyzed reels",
        },
    ],
)

# Configure CORS middleware (from settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_allowed_origins,
    allow_credentials=_settings.cors_allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)

app.add_middleware(RequestTimingMiddleware)


# =============================================================================
# Exception Handlers
# =============================================================================


def _error_response(status_code: int, error: str, code: str, detail: str | None = None) -> JSONResponse:
    response = ErrorResponse(error=error, code=code, detail=detail)
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json", exclude_none=True),
    )


@app.exception_handler(ReelLensError)
async def reellens_exception_handler(request: Request, exc: ReelLensError) -> JSONResponse:
    """Map domain errors to their status code and error code."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request_failed",
        path=request.url.path,
        method=request.method,
        code=exc.code,
        error=exc.message,
        error_type=type(exc).__name__,
    )
    return _error_response(exc.status_code, exc.message, exc.code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report the first validation failure as a 400."""
    errors = exc.errors()
    message = "Request validation failed"
    if errors:
        first = errors[0]
        ctx_error = (first.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error else first["msg"]
        field = ".".join(str(loc) for loc in first["loc"] if loc != "body")
        if field:
            message = f"{field}: {message}"

    logger.info("request_validation_failed", path=request.url.path, error=message)
    return _error_response(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, wrong method) in the envelope."""
    code = "NOT_FOUND" if exc.status_code == status.HTTP_404_NOT_FOUND else "HTTP_ERROR"
    return _error_response(exc.status_code, str(exc.detail), code)


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal server error",
        "INTERNAL_ERROR",
        detail=str(exc) if get_settings().debug else None,
    )


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/", include_in_schema=False)
async def root() -> dict:
    """Root endpoint - points to API documentation."""
    return {
        "name": API_TITLE,
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics",
        "api": "/api",
    }


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)

api_router = APIRouter(prefix="/api")
api_router.include_router(analyze_router)
api_router.include_router(compare_router)
api_router.include_router(users_router)

app.include_router(api_router)

app.mount("/metrics", get_metrics_app())


# =============================================================================
# Development Server
# =============================================================================


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "reellens.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=_settings.is_development,
        log_level=_settings.log_level.lower(),
    )
