from fastapi import APIRouter

from summit_invites.features.admin.routes.auth import router as auth_router
from summit_invites.features.admin.routes.dashboard import router as dashboard_router

router = APIRouter(prefix="/api/admin", tags=["Admin"])

router.include_router(auth_router)
router.include_router(dashboard_router)
