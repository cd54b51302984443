"""Reel analysis endpoint."""

from fastapi import APIRouter, Depends

from reellens.api.dependencies import get_reconciler
from reellens.api.models import AnalyzeRequest, AnalyzeResponse, ErrorResponse
from reellens.services.reconciler import ReelReconciler

router = APIRouter(tags=["Analysis"])


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    summary="Analyze a reel",
    description=(
        "Scrape, analyze and store an Instagram reel. A record analyzed within "
        "the cache window is returned as-is unless forceRefresh is set."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Invalid reel URL"},
        500: {"model": ErrorResponse, "description": "Scraping or storage failure"},
    },
)
async def analyze_reel(
    request: AnalyzeRequest,
    reconciler: ReelReconciler = Depends(get_reconciler),
) -> AnalyzeResponse:
    """Return the stored record for a reel, refreshing it when stale."""
    record = await reconciler.reconcile(request.url, force_refresh=request.force_refresh)
    return AnalyzeResponse(data=record)
