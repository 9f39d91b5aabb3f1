from fastapi import APIRouter, Depends, status

from summit_invites.features.admin.schemas.auth import AdminLoginRequest, AdminResponse
from summit_invites.features.admin.services.auth import AdminAuthService
from summit_invites.features.admin.utils.auth import get_current_admin
from summit_invites.platform.response import api_response

router = APIRouter(tags=["Admin - Authentication"])


@router.post("/login", status_code=status.HTTP_200_OK, summary="Login as admin")
async def login_admin(login_data: AdminLoginRequest):
    """
    Authenticate the operator and return an admin bearer token.
    """
    admin, access_token = AdminAuthService().login_admin(login_data)

    return api_response(
        data={"admin": admin, "access_token": access_token, "token_type": "bearer"},
        message="Admin authenticated",
    )


@router.post("/logout", status_code=status.HTTP_200_OK, summary="Logout admin")
async def logout_admin(current_admin: dict = Depends(get_current_admin)):
    """
    Tokens are stateless, so this only signals the client to discard its token.
    """
    return api_response(data={}, message="Logged out")


@router.get("/me", status_code=status.HTTP_200_OK, summary="Get current admin")
async def get_current_admin_profile(current_admin: dict = Depends(get_current_admin)):
    return api_response(
        data=AdminResponse(username=current_admin["username"]),
        message="Admin profile retrieved successfully",
    )
