"""Per-creator analytics endpoint."""

from fastapi import APIRouter, Depends

from reellens.api.dependencies import get_store
from reellens.api.models import USERNAME_PATTERN, ErrorResponse, UserAnalyticsResponse
from reellens.core.exceptions import InvalidRequestError
from reellens.services.reports import get_user_analytics
from reellens.storage.base import ReelStore

router = APIRouter(prefix="/user", tags=["Users"])


@router.get(
    "/{username}",
    response_model=UserAnalyticsResponse,
    summary="Get creator analytics",
    description="Aggregate every analyzed reel of a creator. A leading '@' is ignored.",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid username format"},
        404: {"model": ErrorResponse, "description": "No analyzed reels for this creator"},
    },
)
async def user_analytics(
    username: str,
    store: ReelStore = Depends(get_store),
) -> UserAnalyticsResponse:
    if not USERNAME_PATTERN.fullmatch(username):
        raise InvalidRequestError("Invalid username format", {"username": username[:64]})

    analytics = await get_user_analytics(store, username)
    return UserAnalyticsResponse(data=analytics)
