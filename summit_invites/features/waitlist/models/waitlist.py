from sqlalchemy import Column, DateTime, Integer, String, Text

from summit_invites.platform.db.base import BaseModel


class WaitlistStatus:
    PENDING = "pending"
    PROMOTED = "promoted"
    REJECTED = "rejected"


class WaitlistEntry(BaseModel):
    __tablename__ = "waitlist"

    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    company = Column(String(255), nullable=False)
    company_revenue = Column(String(32), nullable=False)
    role = Column(String(255), nullable=False)
    company_website = Column(String(500), nullable=True)
    motivation = Column(Text, nullable=False)

    priority_score = Column(Integer, default=0, nullable=False, index=True)
    status = Column(String(20), default=WaitlistStatus.PENDING, nullable=False, index=True)
    admin_notes = Column(Text, nullable=True)
    promoted_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<WaitlistEntry(email={self.email}, score={self.priority_score}, status={self.status})>"
