from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, status

from summit_invites.features.admin.schemas.auth import AdminLoginRequest, AdminResponse
from summit_invites.features.auth.utils.security import create_access_token, credentials_match
from summit_invites.platform.config import settings
from summit_invites.platform.logger import get_logger

logger = get_logger(__name__)


class AdminAuthService:
    """Single operator account configured through ADMIN_USERNAME / ADMIN_PASSWORD."""

    def __init__(self, username: Optional[str] = None, password: Optional[str] = None):
        self.username = username if username is not None else settings.ADMIN_USERNAME
        self.password = password if password is not None else settings.ADMIN_PASSWORD

    def authenticate_admin(self, username: str, password: str) -> bool:
        username_ok = credentials_match(username, self.username)
        password_ok = credentials_match(password, self.password)
        return username_ok and password_ok

    def login_admin(self, login_data: AdminLoginRequest) -> tuple[AdminResponse, str]:
        if not self.username or not self.password:
            logger.error("Admin login attempted but admin credentials are not configured")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Admin credentials not configured",
            )

        if not self.authenticate_admin(login_data.username, login_data.password):
            logger.warning(f"Failed admin login for {login_data.username!r}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid admin credentials",
                headers={"WWW-Authenticate": "Bearer"},
            )

        access_token = create_access_token(
            data={"sub": self.username, "is_admin": True},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        return AdminResponse(username=self.username), access_token
