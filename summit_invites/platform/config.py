from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "The Summit 25"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    APP_BASE_URL: str = "http://localhost:8000"

    # ── Database ────────────────────────────────
    DATABASE_URL: str = "sqlite+aiosqlite:///./summit.db"

    # ── Invitation codes ────────────────────────
    CODE_PREFIX: str = "SUMMIT"
    CODE_RANDOM_LENGTH: int = 6
    CODE_MAX_ATTEMPTS: int = 10
    CODE_BATCH_SIZE: int = 5
    CODE_TTL_DAYS: int = 90
    ADMIN_SENTINEL_OWNER: str = "admin"

    # ── Admin console ───────────────────────────
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    # ── JWT / Auth ──────────────────────────────
    JWT_SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    ALGORITHM: str = "HS256"

    # ── Email (Brevo transactional API) ─────────
    BREVO_API_KEY: str = ""
    BREVO_API_URL: str = "https://api.brevo.com/v3/smtp/email"
    MAIL_FROM_ADDRESS: str = "info@thesummit25.com"
    MAIL_FROM_NAME: str = "The Summit 25"
    EMAIL_TIMEOUT: int = 30

    # ── reCAPTCHA v3 ────────────────────────────
    RECAPTCHA_SECRET_KEY: Optional[str] = None
    RECAPTCHA_VERIFY_URL: str = "https://www.google.com/recaptcha/api/siteverify"
    RECAPTCHA_MIN_SCORE: float = 0.5

    # ── Rate limiting ───────────────────────────
    REDIS_URL: str = "redis://localhost:6379/0"
    FORCE_IN_MEMORY_RATE_LIMITER: bool = False
    WHITELIST_IPS: list[str] = []
    RATE_LIMITS: dict[str, int] = {
        "/api/validate-code": 5,
        "/api/waitlist": 3,
        "/api/send-invitation": 10,
    }

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
