from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import aliased

from summit_invites.features.users.models.user import User
from summit_invites.platform.db.errors import store_operation
from summit_invites.platform.db.session import session_scope


class ReferralGraphReader:
    """
    Read-only view of the invitation tree built from ``User.invited_by``.

    Only one level is surfaced today. The edges support a recursive walk
    (e.g. a recursive CTE over ``invited_by``) should deeper trees be needed.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @store_operation
    async def get_direct_invitees(self, user_id: str) -> list[User]:
        async with session_scope(self.session_factory) as session:
            result = await session.scalars(
                select(User)
                .where(User.invited_by == user_id)
                .order_by(User.created_at.desc(), User.id.desc())
            )
            return list(result.all())

    @store_operation
    async def get_inviter(self, user_id: str) -> Optional[User]:
        inviter = aliased(User)
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(inviter).join(User, User.invited_by == inviter.id).where(User.id == user_id)
            )
