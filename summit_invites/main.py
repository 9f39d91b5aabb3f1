from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from summit_invites.features.admin.routes import router as admin_router
from summit_invites.features.codes.routes.codes import router as codes_router
from summit_invites.features.health.routes.health import router as health_router
from summit_invites.features.registration.routes.registration import router as registration_router
from summit_invites.features.users.routes.users import router as users_router
from summit_invites.middlewares.rate_limit import RateLimitMiddleware
from summit_invites.platform.config import settings
from summit_invites.platform.db import models
from summit_invites.platform.db.session import engine
from summit_invites.platform.exceptions import add_exception_handlers
from summit_invites.platform.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Local SQLite databases are created on startup; other environments run alembic.
    if settings.ENVIRONMENT == "local" and settings.DATABASE_URL.startswith("sqlite"):
        async with engine.begin() as conn:
            await conn.run_sync(models.Base.metadata.create_all)
    logger.info(f"{settings.APP_NAME} API started ({settings.ENVIRONMENT})")
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{settings.APP_NAME} API",
        description="Invitation-only registration, referral codes and waitlist",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(RateLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(codes_router)
    app.include_router(registration_router)
    app.include_router(users_router)
    app.include_router(admin_router)

    return app


app = create_app()
