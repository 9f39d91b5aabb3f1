"""
Test configuration and fixtures for the Summit invitations API.

Every test gets its own SQLite file database with the full schema, plus
stores and an orchestrator bound to it. Outbound email and reCAPTCHA are
replaced with mocks.
"""

import os
import tempfile

from dotenv import load_dotenv

load_dotenv()

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(tempfile.mkdtemp(), 'summit.db')}"
os.environ["ENVIRONMENT"] = "local"
os.environ["FORCE_IN_MEMORY_RATE_LIMITER"] = "true"
os.environ["BREVO_API_KEY"] = "test-brevo-key"
os.environ["RECAPTCHA_SECRET_KEY"] = "test-recaptcha-secret"
os.environ["ADMIN_USERNAME"] = "summit-admin"
os.environ["ADMIN_PASSWORD"] = "correct-horse-battery"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from summit_invites.features.auth.utils.security import create_access_token
from summit_invites.features.codes.services.code_store import SqlCodeStore
from summit_invites.features.registration.services.registration import RegistrationOrchestrator
from summit_invites.features.users.schemas.user import UserProfile
from summit_invites.features.users.services.referrals import ReferralGraphReader
from summit_invites.features.users.services.user_store import UserStore
from summit_invites.features.waitlist.schemas.waitlist import WaitlistSubmission
from summit_invites.features.waitlist.services.waitlist import WaitlistStore
from summit_invites.platform.db.models import Base
from summit_invites.platform.db.session import build_engine, build_session_factory
from summit_invites.platform.dependencies import (
    get_notifier,
    get_recaptcha_verifier,
    get_session_factory,
)
from summit_invites.platform.services.recaptcha import RecaptchaResult


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'summit_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def code_store(session_factory) -> SqlCodeStore:
    return SqlCodeStore(session_factory)


@pytest.fixture
def user_store(session_factory) -> UserStore:
    return UserStore(session_factory)


@pytest.fixture
def waitlist_store(session_factory) -> WaitlistStore:
    return WaitlistStore(session_factory)


@pytest.fixture
def referral_reader(session_factory) -> ReferralGraphReader:
    return ReferralGraphReader(session_factory)


@pytest.fixture
def notifier():
    """Stands in for EmailNotifier; every send succeeds unless a test says otherwise."""
    mock = AsyncMock()
    mock.send = AsyncMock(return_value=True)
    return mock


@pytest.fixture
def verifier():
    mock = AsyncMock()
    mock.verify = AsyncMock(return_value=RecaptchaResult(is_valid=True, score=0.9))
    return mock


@pytest.fixture
def orchestrator(session_factory, code_store, user_store, waitlist_store, notifier):
    return RegistrationOrchestrator(session_factory, code_store, user_store, waitlist_store, notifier)


def make_profile(email: str, **overrides) -> UserProfile:
    data = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": email,
        "company": "Analytical Engines",
        "companyRevenue": "$1mi-$3mi",
        "role": "Founder",
    }
    data.update(overrides)
    return UserProfile(**data)


def make_submission(email: str, **overrides) -> WaitlistSubmission:
    data = {
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": email,
        "company": "Compilers Inc",
        "companyRevenue": "$5mi+",
        "role": "CEO",
        "motivation": "I want to meet other founders building developer tools.",
    }
    data.update(overrides)
    return WaitlistSubmission(**data)


@pytest.fixture
def user_token():
    def _token(user_id: str, email: str = "user@example.com") -> str:
        return create_access_token(data={"sub": user_id, "email": email})

    return _token


@pytest.fixture
def admin_headers():
    token = create_access_token(data={"sub": "summit-admin", "is_admin": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_app(session_factory, notifier, verifier):
    """A fresh application per test, wired to the per-test database."""
    from summit_invites.main import create_app

    app = create_app()
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_recaptcha_verifier] = lambda: verifier
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as ac:
        yield ac
