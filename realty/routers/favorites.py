"""
Favorites API endpoints for anonymous visitors.
The session is identified by the x-session-id header.
"""

from fastapi import APIRouter, Depends, status, Response
from typing import List, Optional
from uuid import UUID

from realty.schemas.favorite import (
    FavoriteCreate,
    FavoriteResponse,
    FavoriteCheckResponse,
    SessionResponse
)
from realty.schemas.error import error_responses
from realty.services.favorite import FavoriteService
from realty.utils.dependencies import get_favorite_service, get_session_id


router = APIRouter(tags=["Favorites"])


@router.get(
    "/session",
    response_model=SessionResponse,
    summary="Get or create a session id",
    description="Echoes the x-session-id header, or issues a new session id when none is sent."
)
async def get_session(session_id: Optional[str] = Depends(get_session_id)) -> SessionResponse:
    return SessionResponse(session_id=FavoriteService.resolve_session(session_id))


@router.get(
    "/favorites",
    response_model=List[FavoriteResponse],
    summary="List favorites",
    description="Favorites of the session with current property data, newest first.",
    responses=error_responses(400, 500)
)
async def list_favorites(
    session_id: Optional[str] = Depends(get_session_id),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> List[FavoriteResponse]:
    favorites = await favorite_service.list_favorites(session_id)
    return [FavoriteResponse.model_validate(fav.to_dict()) for fav in favorites]


@router.post(
    "/favorites",
    response_model=FavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add favorite",
    description="Bookmark a property. Returns 201 for a new favorite and 200 when it already existed.",
    responses=error_responses(400, 404, 500)
)
async def add_favorite(
    favorite_data: FavoriteCreate,
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteResponse:
    """
    Add a property to the session's favorites.

    Raises:
        ValidationError: If the session header is missing
        PropertyNotFoundError: If the property doesn't exist
    """
    favorite, created = await favorite_service.add_favorite(session_id, favorite_data.property_id)
    if not created:
        response.status_code = status.HTTP_200_OK
    return FavoriteResponse.model_validate(favorite.to_dict())


@router.delete(
    "/favorites/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Remove favorite",
    description="Remove a property from the session's favorites. Removing a missing favorite succeeds.",
    responses=error_responses(400, 500)
)
async def remove_favorite(
    property_id: UUID,
    session_id: Optional[str] = Depends(get_session_id),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> Response:
    await favorite_service.remove_favorite(session_id, property_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/favorites/{property_id}/check",
    response_model=FavoriteCheckResponse,
    summary="Check favorite",
    responses=error_responses(400, 500)
)
async def check_favorite(
    property_id: UUID,
    session_id: Optional[str] = Depends(get_session_id),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteCheckResponse:
    is_favorite = await favorite_service.is_favorite(session_id, property_id)
    return FavoriteCheckResponse(is_favorite=is_favorite)
