from .auth import AdminLoginRequest, AdminResponse
from .dashboard import AdminStatsResponse

__all__ = [
    "AdminLoginRequest",
    "AdminResponse",
    "AdminStatsResponse",
]
