"""API route modules."""

from reellens.api.routes.analyze import router as analyze_router
from reellens.api.routes.compare import router as compare_router
from reellens.api.routes.health import router as health_router
from reellens.api.routes.users import router as users_router

__all__ = [
    "analyze_router",
    "compare_router",
    "health_router",
    "users_router",
]
