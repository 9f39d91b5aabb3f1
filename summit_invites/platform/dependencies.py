"""
FastAPI providers for the stores and services.

Everything hangs off ``get_session_factory`` so tests can point the whole
graph at another database with a single dependency override.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summit_invites.features.codes.services.code_store import CodeStore, SqlCodeStore
from summit_invites.features.registration.services.registration import RegistrationOrchestrator
from summit_invites.features.users.services.referrals import ReferralGraphReader
from summit_invites.features.users.services.user_store import UserStore
from summit_invites.features.waitlist.services.waitlist import WaitlistStore
from summit_invites.platform.db.session import SessionLocal
from summit_invites.platform.services.email import EmailNotifier
from summit_invites.platform.services.recaptcha import RecaptchaVerifier


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return SessionLocal


def get_code_store(factory=Depends(get_session_factory)) -> CodeStore:
    return SqlCodeStore(factory)


def get_user_store(factory=Depends(get_session_factory)) -> UserStore:
    return UserStore(factory)


def get_waitlist_store(factory=Depends(get_session_factory)) -> WaitlistStore:
    return WaitlistStore(factory)


def get_referral_reader(factory=Depends(get_session_factory)) -> ReferralGraphReader:
    return ReferralGraphReader(factory)


def get_notifier(factory=Depends(get_session_factory)) -> EmailNotifier:
    return EmailNotifier(factory)


def get_recaptcha_verifier() -> RecaptchaVerifier:
    return RecaptchaVerifier()


def get_orchestrator(
    factory=Depends(get_session_factory),
    codes: CodeStore = Depends(get_code_store),
    users: UserStore = Depends(get_user_store),
    waitlist: WaitlistStore = Depends(get_waitlist_store),
    notifier: EmailNotifier = Depends(get_notifier),
) -> RegistrationOrchestrator:
    return RegistrationOrchestrator(factory, codes, users, waitlist, notifier)
