from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String

from summit_invites.platform.db.base import BaseModel
from summit_invites.platform.utils.clock import as_utc, utcnow


class InvitationCode(BaseModel):
    __tablename__ = "invitation_codes"

    code = Column(String(32), unique=True, nullable=False, index=True)

    # Either a users.id or the admin sentinel owner, so no foreign key here.
    assigned_to_user_id = Column(String(36), nullable=True, index=True)
    used_by_user_id = Column(String(36), ForeignKey("users.id"), nullable=True)

    is_used = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True)

    reserved_for_email = Column(String(255), nullable=True)
    reserved_at = Column(DateTime(timezone=True), nullable=True)

    used_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_invitation_codes_owner_created", "assigned_to_user_id", "created_at"),
    )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return as_utc(self.expires_at) <= (now or utcnow())

    def is_redeemable(self, now: Optional[datetime] = None) -> bool:
        """Unused and unexpired. Reservation does not block redemption."""
        return not self.is_used and not self.is_expired(now)

    def is_available(self, now: Optional[datetime] = None) -> bool:
        """Redeemable and not held for anyone, i.e. free to hand out."""
        return self.is_redeemable(now) and self.reserved_for_email is None

    def __repr__(self):
        return f"<InvitationCode(code={self.code}, owner={self.assigned_to_user_id}, is_used={self.is_used})>"
