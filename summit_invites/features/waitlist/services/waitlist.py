from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summit_invites.features.waitlist.models.waitlist import WaitlistEntry, WaitlistStatus
from summit_invites.features.waitlist.schemas.waitlist import WaitlistSubmission
from summit_invites.features.waitlist.utils.priority import calculate_priority_score
from summit_invites.platform.db.errors import store_operation
from summit_invites.platform.db.session import session_scope
from summit_invites.platform.exceptions import AlreadyOnWaitlist
from summit_invites.platform.logger import get_logger
from summit_invites.platform.utils.clock import utcnow
from summit_invites.platform.utils.email_address import normalize_email

logger = get_logger(__name__)


class PromoteResult(str, Enum):
    PROMOTED = "promoted"
    NOT_FOUND = "not_found"
    ALREADY_PROMOTED = "already_promoted"


@dataclass
class Promotion:
    result: PromoteResult
    entry: Optional[WaitlistEntry] = None


class WaitlistStore:
    """Waitlist persistence plus priority stamping at insert time."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @store_operation
    async def submit(self, submission: WaitlistSubmission) -> WaitlistEntry:
        """
        Insert a pending entry with its priority score computed from
        (company revenue, role). Duplicate checks against users and other
        entries belong to the caller; the unique email index is the backstop.
        """
        revenue = submission.company_revenue.value
        entry = WaitlistEntry(
            email=normalize_email(submission.email),
            first_name=submission.first_name,
            last_name=submission.last_name,
            company=submission.company,
            company_revenue=revenue,
            role=submission.role,
            company_website=str(submission.company_website) if submission.company_website else None,
            motivation=submission.motivation,
            priority_score=calculate_priority_score(revenue, submission.role),
            status=WaitlistStatus.PENDING,
        )

        try:
            async with session_scope(self.session_factory) as session:
                session.add(entry)
                await session.flush()
                await session.refresh(entry)
        except IntegrityError as exc:
            logger.info(f"Waitlist insert rejected for duplicate email {entry.email}")
            raise AlreadyOnWaitlist() from exc

        logger.info(f"Waitlist entry {entry.id} created with priority {entry.priority_score}")
        return entry

    @store_operation
    async def get(self, entry_id: str) -> Optional[WaitlistEntry]:
        async with session_scope(self.session_factory) as session:
            return await session.get(WaitlistEntry, entry_id)

    @store_operation
    async def get_by_email(self, email: str) -> Optional[WaitlistEntry]:
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(WaitlistEntry).where(WaitlistEntry.email == normalize_email(email))
            )

    @store_operation
    async def get_pending_by_email(self, email: str) -> Optional[WaitlistEntry]:
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(WaitlistEntry).where(
                    WaitlistEntry.email == normalize_email(email),
                    WaitlistEntry.status == WaitlistStatus.PENDING,
                )
            )

    @store_operation
    async def list_pending(self) -> list[WaitlistEntry]:
        """Highest score first; earlier submissions win ties."""
        async with session_scope(self.session_factory) as session:
            result = await session.scalars(
                select(WaitlistEntry)
                .where(WaitlistEntry.status == WaitlistStatus.PENDING)
                .order_by(
                    WaitlistEntry.priority_score.desc(),
                    WaitlistEntry.created_at.asc(),
                    WaitlistEntry.id.asc(),
                )
            )
            return list(result.all())

    async def _transition(
        self, entry_id: str, values: dict, session: Optional[AsyncSession] = None
    ) -> Promotion:
        async with session_scope(self.session_factory, session) as active:
            entry = await active.scalar(
                update(WaitlistEntry)
                .where(
                    WaitlistEntry.id == entry_id,
                    WaitlistEntry.status == WaitlistStatus.PENDING,
                )
                .values(**values)
                .returning(WaitlistEntry)
                .execution_options(synchronize_session=False)
            )
            if entry is not None:
                return Promotion(PromoteResult.PROMOTED, entry)

            current = await active.get(WaitlistEntry, entry_id)

        if current is None:
            return Promotion(PromoteResult.NOT_FOUND)
        return Promotion(PromoteResult.ALREADY_PROMOTED, current)

    @store_operation
    async def promote(self, entry_id: str, session: Optional[AsyncSession] = None) -> Promotion:
        """
        Move a pending entry to promoted. Minting its code is the caller's job;
        pass ``session`` so both land in one transaction.
        """
        promotion = await self._transition(
            entry_id,
            {"status": WaitlistStatus.PROMOTED, "promoted_at": utcnow()},
            session=session,
        )
        logger.info(f"Promote waitlist entry {entry_id}: {promotion.result.value}")
        return promotion

    @store_operation
    async def reject(self, entry_id: str) -> Promotion:
        promotion = await self._transition(entry_id, {"status": WaitlistStatus.REJECTED})
        logger.info(f"Reject waitlist entry {entry_id}: {promotion.result.value}")
        return promotion

    @store_operation
    async def update_priority(
        self, entry_id: str, priority_score: int, admin_notes: Optional[str] = None
    ) -> Optional[WaitlistEntry]:
        values = {"priority_score": priority_score}
        if admin_notes is not None:
            values["admin_notes"] = admin_notes

        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                update(WaitlistEntry)
                .where(WaitlistEntry.id == entry_id)
                .values(**values)
                .returning(WaitlistEntry)
                .execution_options(synchronize_session=False)
            )

    @store_operation
    async def count_pending(self) -> int:
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(func.count(WaitlistEntry.id)).where(
                    WaitlistEntry.status == WaitlistStatus.PENDING
                )
            ) or 0
