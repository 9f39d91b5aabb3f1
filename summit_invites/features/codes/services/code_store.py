from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Protocol, runtime_checkable

from sqlalchemy import and_, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summit_invites.features.codes.models.invitation_code import InvitationCode
from summit_invites.features.codes.utils.code_generator import canonicalize, generate_unique_code
from summit_invites.platform.config import settings
from summit_invites.platform.db.base import new_id
from summit_invites.platform.db.errors import store_operation
from summit_invites.platform.db.session import session_scope
from summit_invites.platform.logger import get_logger
from summit_invites.platform.utils.clock import utcnow
from summit_invites.platform.utils.email_address import normalize_email

logger = get_logger(__name__)


class ConsumeResult(str, Enum):
    CONSUMED = "consumed"
    ALREADY_CONSUMED = "already_consumed"


def _unexpired(now: datetime):
    return or_(InvitationCode.expires_at.is_(None), InvitationCode.expires_at > now)


def _redeemable(now: datetime):
    return and_(InvitationCode.is_used.is_(False), _unexpired(now))


@dataclass
class Reservation:
    code: InvitationCode
    # False when an existing hold for the same (owner, email) was returned.
    created: bool


@runtime_checkable
class CodeStore(Protocol):
    """Persistence contract for invitation codes.

    Every operation canonicalises the supplied code to uppercase first.
    """

    async def create_batch(
        self, owner_id: str, count: int, session: Optional[AsyncSession] = None
    ) -> list[InvitationCode]: ...

    async def create_one(
        self, owner_id: str, session: Optional[AsyncSession] = None
    ) -> InvitationCode: ...

    async def validate(self, code: str) -> Optional[InvitationCode]: ...

    async def consume(
        self, code: str, used_by_user_id: str, session: Optional[AsyncSession] = None
    ) -> ConsumeResult: ...

    async def reserve(self, owner_id: str, email: str) -> Optional[InvitationCode]: ...

    async def reserve_with_outcome(self, owner_id: str, email: str) -> Optional[Reservation]: ...

    async def unreserve(self, code: str) -> bool: ...

    async def get_available_for_owner(self, owner_id: str) -> Optional[InvitationCode]: ...

    async def list_by_owner(self, owner_id: str) -> list[InvitationCode]: ...

    async def list_all(self) -> list[InvitationCode]: ...

    async def list_used_by_owner(self, owner_id: str) -> list[InvitationCode]: ...

    async def count_active(self) -> int: ...


class SqlCodeStore:
    """Relational ``CodeStore``.

    Cross-request guarantees live in the SQL itself: consumption is a single
    conditional UPDATE, and reservation locks one candidate row with
    ``FOR UPDATE SKIP LOCKED`` before a conditional UPDATE claims it. No
    in-process locks are taken, so any number of workers can share the table.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @staticmethod
    async def _code_exists(session: AsyncSession, code: str) -> bool:
        found = await session.scalar(
            select(InvitationCode.id).where(InvitationCode.code == canonicalize(code)).limit(1)
        )
        return found is not None

    @store_operation
    async def create_batch(
        self, owner_id: str, count: int, session: Optional[AsyncSession] = None
    ) -> list[InvitationCode]:
        """
        Mint ``count`` fresh codes for ``owner_id`` in one INSERT.

        The rows come back through RETURNING, so callers see the persisted
        ids and timestamps. Either every code is written or none is. Pass
        ``session`` to join a caller's transaction.
        """
        if count < 1:
            return []

        expires_at = utcnow() + timedelta(days=settings.CODE_TTL_DAYS)

        async with session_scope(self.session_factory, session) as active:
            minted: set[str] = set()

            async def taken(candidate: str) -> bool:
                return candidate in minted or await self._code_exists(active, candidate)

            rows = []
            for _ in range(count):
                code = await generate_unique_code(taken)
                minted.add(code)
                rows.append(
                    {
                        "id": new_id(),
                        "code": code,
                        "assigned_to_user_id": owner_id,
                        "is_used": False,
                        "expires_at": expires_at,
                    }
                )

            result = await active.scalars(
                insert(InvitationCode).returning(InvitationCode, sort_by_parameter_order=True),
                rows,
            )
            codes = list(result.all())

        logger.info(f"Issued {len(codes)} invitation code(s) to owner {owner_id}")
        return codes

    async def create_one(
        self, owner_id: str, session: Optional[AsyncSession] = None
    ) -> InvitationCode:
        (code,) = await self.create_batch(owner_id, 1, session=session)
        return code

    @store_operation
    async def validate(self, code: str) -> Optional[InvitationCode]:
        """Return the code if it is unused and unexpired. Reservation is ignored."""
        now = utcnow()
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(InvitationCode).where(
                    InvitationCode.code == canonicalize(code),
                    _redeemable(now),
                )
            )

    @store_operation
    async def consume(
        self, code: str, used_by_user_id: str, session: Optional[AsyncSession] = None
    ) -> ConsumeResult:
        """
        Flip ``is_used`` false -> true exactly once.

        Two concurrent calls for the same code produce one CONSUMED and one
        ALREADY_CONSUMED because the UPDATE is conditioned on ``is_used``.
        Pass ``session`` to join a caller's transaction.
        """
        async with session_scope(self.session_factory, session) as active:
            result = await active.execute(
                update(InvitationCode)
                .where(
                    InvitationCode.code == canonicalize(code),
                    InvitationCode.is_used.is_(False),
                )
                .values(is_used=True, used_by_user_id=used_by_user_id, used_at=utcnow())
                .execution_options(synchronize_session=False)
            )

        if result.rowcount == 1:
            return ConsumeResult.CONSUMED

        logger.info(f"Invitation code {canonicalize(code)} was already consumed")
        return ConsumeResult.ALREADY_CONSUMED

    async def reserve(self, owner_id: str, email: str) -> Optional[InvitationCode]:
        """
        Hold one of the owner's available codes for ``email``.

        Idempotent per (owner, email): an active reservation is returned as
        is. Otherwise the oldest available code is locked (skipping rows other
        transactions hold) and claimed with a conditional UPDATE. Returns None
        when the owner has nothing left to hand out.
        """
        reservation = await self.reserve_with_outcome(owner_id, email)
        return reservation.code if reservation is not None else None

    @store_operation
    async def reserve_with_outcome(self, owner_id: str, email: str) -> Optional[Reservation]:
        """Same as ``reserve``, also reporting whether this call placed the hold."""
        email = normalize_email(email)
        now = utcnow()

        async with session_scope(self.session_factory) as session:
            existing = await session.scalar(
                select(InvitationCode)
                .where(
                    InvitationCode.assigned_to_user_id == owner_id,
                    InvitationCode.reserved_for_email == email,
                    _redeemable(now),
                )
                .order_by(InvitationCode.created_at.asc(), InvitationCode.id.asc())
                .limit(1)
            )
            if existing is not None:
                return Reservation(code=existing, created=False)

            candidate_id = await session.scalar(
                select(InvitationCode.id)
                .where(
                    InvitationCode.assigned_to_user_id == owner_id,
                    InvitationCode.reserved_for_email.is_(None),
                    _redeemable(now),
                )
                .order_by(InvitationCode.created_at.asc(), InvitationCode.id.asc())
                .limit(1)
                .with_for_update(skip_locked=True)
            )
            if candidate_id is None:
                logger.info(f"No available invitation codes for owner {owner_id}")
                return None

            reserved = await session.scalar(
                update(InvitationCode)
                .where(
                    InvitationCode.id == candidate_id,
                    InvitationCode.reserved_for_email.is_(None),
                    InvitationCode.is_used.is_(False),
                )
                .values(reserved_for_email=email, reserved_at=now)
                .returning(InvitationCode)
                .execution_options(synchronize_session=False)
            )

        if reserved is None:
            logger.info(f"Lost reservation race for owner {owner_id}")
            return None
        return Reservation(code=reserved, created=True)

    @store_operation
    async def unreserve(self, code: str) -> bool:
        """Release a reservation so the code returns to the available pool."""
        async with session_scope(self.session_factory) as session:
            result = await session.execute(
                update(InvitationCode)
                .where(
                    InvitationCode.code == canonicalize(code),
                    InvitationCode.is_used.is_(False),
                )
                .values(reserved_for_email=None, reserved_at=None)
                .execution_options(synchronize_session=False)
            )
        return result.rowcount == 1

    @store_operation
    async def get_available_for_owner(self, owner_id: str) -> Optional[InvitationCode]:
        now = utcnow()
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(InvitationCode)
                .where(
                    InvitationCode.assigned_to_user_id == owner_id,
                    InvitationCode.reserved_for_email.is_(None),
                    _redeemable(now),
                )
                .order_by(InvitationCode.created_at.asc(), InvitationCode.id.asc())
                .limit(1)
            )

    @store_operation
    async def list_by_owner(self, owner_id: str) -> list[InvitationCode]:
        async with session_scope(self.session_factory) as session:
            result = await session.scalars(
                select(InvitationCode)
                .where(InvitationCode.assigned_to_user_id == owner_id)
                .order_by(InvitationCode.created_at.desc(), InvitationCode.id.desc())
            )
            return list(result.all())

    @store_operation
    async def list_all(self) -> list[InvitationCode]:
        async with session_scope(self.session_factory) as session:
            result = await session.scalars(
                select(InvitationCode).order_by(
                    InvitationCode.created_at.desc(), InvitationCode.id.desc()
                )
            )
            return list(result.all())

    @store_operation
    async def list_used_by_owner(self, owner_id: str) -> list[InvitationCode]:
        async with session_scope(self.session_factory) as session:
            result = await session.scalars(
                select(InvitationCode)
                .where(
                    InvitationCode.assigned_to_user_id == owner_id,
                    InvitationCode.is_used.is_(True),
                )
                .order_by(InvitationCode.used_at.desc())
            )
            return list(result.all())

    @store_operation
    async def count_active(self) -> int:
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(func.count(InvitationCode.id)).where(InvitationCode.is_used.is_(False))
            ) or 0
