"""
Admin account API endpoints. Every route is restricted to super admins by the
authorization policy table.
"""

from fastapi import APIRouter, Depends, status, Response
from typing import List
from uuid import UUID
import uuid

from realty.schemas.admin import AdminCreate, AdminUpdate, AdminStatusUpdate, AdminResponse
from realty.schemas.error import error_responses
from realty.services.admin import AdminService
from realty.utils.auth import TokenClaims
from realty.utils.dependencies import get_admin_service, get_current_claims


router = APIRouter(prefix="/admins", tags=["Admins"])


@router.get(
    "",
    response_model=List[AdminResponse],
    summary="List admin accounts",
    responses=error_responses(401, 403, 500)
)
async def list_admins(
    claims: TokenClaims = Depends(get_current_claims),
    admin_service: AdminService = Depends(get_admin_service)
) -> List[AdminResponse]:
    admins = await admin_service.list_admins()
    return [AdminResponse.model_validate(admin.to_dict()) for admin in admins]


@router.post(
    "",
    response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create admin account",
    responses=error_responses(400, 401, 403, 409, 500)
)
async def create_admin(
    admin_data: AdminCreate,
    claims: TokenClaims = Depends(get_current_claims),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    """
    Create a new admin account; the creator is recorded in createdBy.

    Raises:
        DuplicateError: If the email is already used
    """
    admin = await admin_service.create_admin(admin_data, created_by=uuid.UUID(claims.admin_id))
    return AdminResponse.model_validate(admin.to_dict())


@router.get(
    "/{admin_id}",
    response_model=AdminResponse,
    summary="Get admin account",
    responses=error_responses(400, 401, 403, 404)
)
async def get_admin(
    admin_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    admin = await admin_service.get_admin(admin_id)
    return AdminResponse.model_validate(admin.to_dict())


@router.put(
    "/{admin_id}",
    response_model=AdminResponse,
    summary="Update admin account",
    description="Partial update. Omitting the password keeps the current one.",
    responses=error_responses(400, 401, 403, 404, 409, 500)
)
async def update_admin(
    admin_id: UUID,
    admin_data: AdminUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    admin = await admin_service.update_admin(admin_id, admin_data, actor=claims)
    return AdminResponse.model_validate(admin.to_dict())


@router.patch(
    "/{admin_id}/status",
    response_model=AdminResponse,
    summary="Activate or deactivate admin account",
    responses=error_responses(400, 401, 403, 404, 500)
)
async def set_admin_status(
    admin_id: UUID,
    status_data: AdminStatusUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    admin_service: AdminService = Depends(get_admin_service)
) -> AdminResponse:
    """
    Raises:
        SelfModificationError: If a super admin deactivates their own account
    """
    admin = await admin_service.set_admin_status(admin_id, status_data.is_active, actor=claims)
    return AdminResponse.model_validate(admin.to_dict())


@router.delete(
    "/{admin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete admin account",
    description="A super admin cannot delete their own account.",
    responses=error_responses(400, 401, 403, 404, 500)
)
async def delete_admin(
    admin_id: UUID,
    claims: TokenClaims = Depends(get_current_claims),
    admin_service: AdminService = Depends(get_admin_service)
) -> Response:
    await admin_service.delete_admin(admin_id, actor=claims)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
