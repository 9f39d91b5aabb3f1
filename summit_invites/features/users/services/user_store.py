from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summit_invites.features.users.models.user import User, UserStatus
from summit_invites.features.users.schemas.user import UserProfile
from summit_invites.platform.db.errors import store_operation
from summit_invites.platform.db.session import session_scope
from summit_invites.platform.exceptions import AccountAlreadyExists
from summit_invites.platform.logger import get_logger
from summit_invites.platform.utils.email_address import normalize_email

logger = get_logger(__name__)


class UserStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    @store_operation
    async def get(self, user_id: str) -> Optional[User]:
        async with session_scope(self.session_factory) as session:
            return await session.get(User, user_id)

    @store_operation
    async def get_by_email(self, email: str) -> Optional[User]:
        async with session_scope(self.session_factory) as session:
            return await session.scalar(select(User).where(User.email == normalize_email(email)))

    @store_operation
    async def create(
        self,
        profile: UserProfile,
        invited_by: Optional[str],
        session: Optional[AsyncSession] = None,
    ) -> User:
        """
        Insert a registered user. With ``session`` the row is only flushed so
        the caller can commit or roll it back together with other writes.
        """
        user = User(
            email=normalize_email(profile.email),
            first_name=profile.first_name,
            last_name=profile.last_name,
            company=profile.company,
            company_revenue=profile.company_revenue.value,
            role=profile.role,
            company_website=str(profile.company_website) if profile.company_website else None,
            status=UserStatus.REGISTERED,
            invited_by=invited_by,
        )

        try:
            async with session_scope(self.session_factory, session) as active:
                active.add(user)
                await active.flush()
                await active.refresh(user)
        except IntegrityError as exc:
            logger.info(f"User insert rejected for duplicate email {user.email}")
            raise AccountAlreadyExists() from exc

        return user

    @store_operation
    async def list_all(self) -> list[User]:
        async with session_scope(self.session_factory) as session:
            result = await session.scalars(
                select(User).order_by(User.created_at.desc(), User.id.desc())
            )
            return list(result.all())

    @store_operation
    async def count_registered(self) -> int:
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(func.count(User.id)).where(User.status == UserStatus.REGISTERED)
            ) or 0

    @store_operation
    async def count_referred(self) -> int:
        async with session_scope(self.session_factory) as session:
            return await session.scalar(
                select(func.count(User.id)).where(User.invited_by.is_not(None))
            ) or 0
