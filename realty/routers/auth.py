"""
Admin login endpoint.
"""

from fastapi import APIRouter, Depends, status

from realty.schemas.auth import LoginRequest, LoginResponse
from realty.schemas.admin import AdminResponse
from realty.schemas.error import error_responses
from realty.services.auth import AuthService
from realty.utils.dependencies import get_auth_service


router = APIRouter(prefix="/admin", tags=["Authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Admin login",
    description="Authenticate with email and password; returns a bearer token valid for 24 hours.",
    responses=error_responses(400, 401)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """Exchange email and password for a bearer token and the account profile."""
    admin, token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )

    return LoginResponse(
        token=token,
        admin=AdminResponse.model_validate(admin.to_dict())
    )
