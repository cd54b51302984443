"""Reel comparison endpoint."""

from fastapi import APIRouter, Depends

from reellens.api.dependencies import get_store
from reellens.api.models import CompareRequest, CompareResponse, ErrorResponse
from reellens.services.reports import compare_reels
from reellens.storage.base import ReelStore

router = APIRouter(tags=["Analysis"])


@router.post(
    "/compare",
    response_model=CompareResponse,
    summary="Compare analyzed reels",
    description="Compare two to five reels that have already been analyzed. Never scrapes.",
    responses={
        400: {"model": ErrorResponse, "description": "Wrong number of URLs or invalid URL"},
        404: {"model": ErrorResponse, "description": "None of the reels has been analyzed"},
    },
)
async def compare(
    request: CompareRequest,
    store: ReelStore = Depends(get_store),
) -> CompareResponse:
    result = await compare_reels(store, request.urls)
    return CompareResponse(data=result)
