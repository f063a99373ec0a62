"""
Property API endpoints: public catalogue queries and admin mutations.
Mutations take multipart form data so images can be uploaded with the listing.
"""

from fastapi import APIRouter, Depends, status, Query, Form, File, UploadFile, Response
from typing import Optional, List
from uuid import UUID

from realty.schemas.property import PropertyResponse
from realty.schemas.error import error_responses
from realty.services.property import PropertyService
from realty.utils.auth import TokenClaims
from realty.utils.dependencies import get_current_claims, get_property_service


router = APIRouter(prefix="/properties", tags=["Properties"])


def _present_files(images: Optional[List[UploadFile]]) -> List[UploadFile]:
    # Browsers send an empty part when no file was picked
    return [f for f in (images or []) if f.filename]


@router.get(
    "",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List properties",
    description=(
        "List properties matching all supplied filters, newest first. "
        "Omitted or blank filters impose no constraint; status=all also lists every status."
    ),
    responses=error_responses(400, 500)
)
async def list_properties(
    property_type: Optional[str] = Query(None, alias="type", description="apartment, house or farm"),
    location: Optional[str] = Query(None, description="Case-insensitive substring of the location"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Inclusive lower price bound"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Inclusive upper price bound"),
    status_filter: Optional[str] = Query(None, alias="status", description="available, sold or all"),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """
    List properties with filtering.

    Raises:
        ValidationError: If a filter value is malformed
    """
    filters = property_service.parse_filters(
        property_type=property_type,
        location=location,
        min_price=min_price,
        max_price=max_price,
        status=status_filter
    )
    properties = await property_service.list_properties(filters)
    return [PropertyResponse.model_validate(prop.to_dict()) for prop in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property details",
    responses=error_responses(400, 404, 500)
)
async def get_property(
    property_id: UUID,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.get_property(property_id)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Create a listing with up to 12 images. Requires an admin token.",
    responses=error_responses(400, 401, 403, 500)
)
async def create_property(
    claims: TokenClaims = Depends(get_current_claims),
    title: Optional[str] = Form(None),
    property_type: Optional[str] = Form(None, alias="type"),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    status_value: Optional[str] = Form(None, alias="status"),
    bedrooms: Optional[str] = Form(None),
    bathrooms: Optional[str] = Form(None),
    parking_spaces: Optional[str] = Form(None, alias="parkingSpaces"),
    area: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None, description="Image files"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Create a new property listing.

    Args:
        claims: Verified admin token claims
        images: Uploaded image files, stored under the upload directory

    Returns:
        Created property

    Raises:
        ValidationError: If form values or files are invalid
    """
    form = {
        "title": title,
        "type": property_type,
        "description": description,
        "location": location,
        "price": price,
        "status": status_value,
        "bedrooms": bedrooms,
        "bathrooms": bathrooms,
        "parkingSpaces": parking_spaces,
        "area": area,
    }
    property_obj = await property_service.create_property(form, _present_files(images))
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description=(
        "Partially update a listing. existingImages (JSON array) lists the current images to keep; "
        "new uploads are appended after them."
    ),
    responses=error_responses(400, 401, 403, 404, 500)
)
async def update_property(
    property_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    title: Optional[str] = Form(None),
    property_type: Optional[str] = Form(None, alias="type"),
    description: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    status_value: Optional[str] = Form(None, alias="status"),
    bedrooms: Optional[str] = Form(None),
    bathrooms: Optional[str] = Form(None),
    parking_spaces: Optional[str] = Form(None, alias="parkingSpaces"),
    area: Optional[str] = Form(None),
    existing_images: Optional[str] = Form(None, alias="existingImages"),
    images: Optional[List[UploadFile]] = File(None, description="New image files"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    form = {
        "title": title,
        "type": property_type,
        "description": description,
        "location": location,
        "price": price,
        "status": status_value,
        "bedrooms": bedrooms,
        "bathrooms": bathrooms,
        "parkingSpaces": parking_spaces,
        "area": area,
    }
    property_obj = await property_service.update_property(
        property_id,
        form,
        _present_files(images),
        existing_images=existing_images
    )
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete property",
    description="Delete a listing, its favorites and its image files.",
    responses=error_responses(400, 401, 403, 404, 500)
)
async def delete_property(
    property_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    await property_service.delete_property(property_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
