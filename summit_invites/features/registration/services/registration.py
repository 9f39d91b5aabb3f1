from dataclasses import dataclass, field
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summit_invites.features.codes.models.invitation_code import InvitationCode
from summit_invites.features.codes.services.code_store import CodeStore, ConsumeResult
from summit_invites.features.users.models.user import User
from summit_invites.features.users.schemas.user import UserProfile
from summit_invites.features.users.services.user_store import UserStore
from summit_invites.features.waitlist.models.waitlist import WaitlistEntry
from summit_invites.features.waitlist.schemas.waitlist import WaitlistSubmission
from summit_invites.features.waitlist.services.waitlist import PromoteResult, WaitlistStore
from summit_invites.platform.config import settings
from summit_invites.platform.db.session import session_scope
from summit_invites.platform.exceptions import (
    AccountAlreadyExists,
    AlreadyOnWaitlist,
    CodeAlreadyConsumed,
    InvalidInvitationCode,
    InvitationDeliveryFailed,
    NoCodesAvailable,
    UserNotFound,
    WaitlistEntryAlreadyPromoted,
    WaitlistEntryNotFound,
)
from summit_invites.platform.logger import get_logger
from summit_invites.platform.services.email import EmailNotifier

logger = get_logger(__name__)


@dataclass
class RegistrationResult:
    user: User
    codes: list[InvitationCode] = field(default_factory=list)


@dataclass
class PromotionResult:
    entry: WaitlistEntry
    code: InvitationCode


def dashboard_url() -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/dashboard"


def registration_url(code: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/register?code={code}"


def invite_url(code: str) -> str:
    return f"{settings.APP_BASE_URL.rstrip('/')}/?code={code}"


class RegistrationOrchestrator:
    """
    Drives the invitation lifecycle across the code, user and waitlist stores.

    Registration runs as: validate code, check email, then create the user,
    consume the code and mint the newcomer's own codes inside one
    transaction. A code lost to a concurrent registration rolls the user
    back, so no account is ever attributed to a double-spent code.
    Notifications are scheduled after commit and never undo the work.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        codes: CodeStore,
        users: UserStore,
        waitlist: WaitlistStore,
        notifier: EmailNotifier,
    ):
        self.session_factory = session_factory
        self.codes = codes
        self.users = users
        self.waitlist = waitlist
        self.notifier = notifier

    async def _notify(
        self,
        background_tasks: Optional[BackgroundTasks],
        template_key: str,
        recipient: str,
        variables: dict,
    ) -> None:
        if background_tasks is not None:
            background_tasks.add_task(self.notifier.send, template_key, recipient, variables)
            return
        if not await self.notifier.send(template_key, recipient, variables):
            logger.warning(f"Notification {template_key} to {recipient} was not delivered")

    async def register(
        self,
        profile: UserProfile,
        invite_code: str,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> RegistrationResult:
        code = await self.codes.validate(invite_code)
        if code is None:
            logger.info(f"Registration rejected: invalid code {invite_code!r}")
            raise InvalidInvitationCode()

        if await self.users.get_by_email(profile.email) is not None:
            logger.info(f"Registration rejected: {profile.email} already has an account")
            raise AccountAlreadyExists()

        owner = code.assigned_to_user_id
        invited_by = None if owner == settings.ADMIN_SENTINEL_OWNER else owner

        async with session_scope(self.session_factory) as session:
            user = await self.users.create(profile, invited_by, session=session)

            outcome = await self.codes.consume(code.code, user.id, session=session)
            if outcome is ConsumeResult.ALREADY_CONSUMED:
                logger.info(f"Registration for {user.email} lost the race for {code.code}")
                raise CodeAlreadyConsumed()

            issued = await self.codes.create_batch(
                user.id, settings.CODE_BATCH_SIZE, session=session
            )

        logger.info(f"User {user.id} registered with code {code.code}, invited by {invited_by}")

        await self._notify(
            background_tasks,
            "registration_confirmation",
            user.email,
            {
                "firstName": user.first_name or "",
                "lastName": user.last_name or "",
                "company": user.company or "",
                "email": user.email,
                "dashboardUrl": dashboard_url(),
            },
        )
        await self._notify(
            background_tasks,
            "referral_codes",
            user.email,
            {
                "firstName": user.first_name or "",
                "codes": ", ".join(c.code for c in issued),
                "dashboardUrl": dashboard_url(),
            },
        )

        return RegistrationResult(user=user, codes=issued)

    async def join_waitlist(
        self,
        submission: WaitlistSubmission,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> WaitlistEntry:
        if await self.users.get_by_email(submission.email) is not None:
            raise AlreadyOnWaitlist()
        if await self.waitlist.get_pending_by_email(submission.email) is not None:
            raise AlreadyOnWaitlist()

        entry = await self.waitlist.submit(submission)

        await self._notify(
            background_tasks,
            "waitlist_confirmation",
            entry.email,
            {"firstName": entry.first_name},
        )
        return entry

    async def promote_waitlist_entry(
        self,
        entry_id: str,
        background_tasks: Optional[BackgroundTasks] = None,
    ) -> PromotionResult:
        """
        Promote a pending entry and hand its applicant a fresh admin-owned code.

        The status flip is conditional, so two admins promoting the same
        entry mint exactly one code between them. Flip and mint commit
        together: if minting fails the entry stays pending and the call can
        be retried.
        """
        async with session_scope(self.session_factory) as session:
            promotion = await self.waitlist.promote(entry_id, session=session)
            if promotion.result is PromoteResult.NOT_FOUND:
                raise WaitlistEntryNotFound()
            if promotion.result is PromoteResult.ALREADY_PROMOTED:
                raise WaitlistEntryAlreadyPromoted()

            entry = promotion.entry
            code = await self.codes.create_one(settings.ADMIN_SENTINEL_OWNER, session=session)

        logger.info(f"Waitlist entry {entry.id} promoted with code {code.code}")

        await self._notify(
            background_tasks,
            "waitlist_promotion",
            entry.email,
            {
                "firstName": entry.first_name,
                "inviteCode": code.code,
                "registrationUrl": registration_url(code.code),
            },
        )
        return PromotionResult(entry=entry, code=code)

    async def send_referral_invitation(
        self, user_id: str, email: str, personal_message: Optional[str] = None
    ) -> InvitationCode:
        """
        Reserve one of the user's codes for ``email`` and mail it.

        Delivery is synchronous here: if the email does not go out a hold
        placed by this call is released and InvitationDeliveryFailed is raised.
        """
        user = await self.users.get(user_id)
        if user is None:
            raise UserNotFound()

        reservation = await self.codes.reserve_with_outcome(user.id, email)
        if reservation is None:
            raise NoCodesAvailable()
        code = reservation.code

        sent = await self.notifier.send(
            "referral_invitation",
            email,
            {
                "referrerName": user.full_name,
                "referrerCompany": user.company or "",
                "inviteCode": code.code,
                "registrationUrl": invite_url(code.code),
                "personalMessage": personal_message or "",
            },
        )
        if not sent:
            # A hold from an earlier delivered invitation stays in place.
            if reservation.created:
                await self.codes.unreserve(code.code)
                logger.warning(f"Invitation from {user.id} to {email} failed; released {code.code}")
            else:
                logger.warning(f"Re-sent invitation from {user.id} to {email} failed; kept {code.code}")
            raise InvitationDeliveryFailed()

        logger.info(f"User {user.id} sent code {code.code} to {email}")
        return code

    async def issue_codes(self, owner_id: str, count: int) -> list[InvitationCode]:
        """Admin code generation for a registered user or the admin sentinel."""
        if owner_id != settings.ADMIN_SENTINEL_OWNER and await self.users.get(owner_id) is None:
            raise UserNotFound()
        return await self.codes.create_batch(owner_id, count)
