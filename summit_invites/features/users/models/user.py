import sqlalchemy
from sqlalchemy import Column, ForeignKey, String

from summit_invites.platform.db.base import BaseModel


class UserStatus:
    REGISTERED = "registered"
    WAITLISTED = "waitlisted"


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    company = Column(String(255), nullable=True)
    company_revenue = Column(String(32), nullable=True)
    role = Column(String(255), nullable=True)
    company_website = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default=UserStatus.REGISTERED)

    # Owner of the code this user redeemed; null for admin-issued codes.
    invited_by = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)

    updated_at = Column(
        sqlalchemy.DateTime(timezone=True),
        server_default=sqlalchemy.func.now(),
        onupdate=sqlalchemy.func.now(),
        nullable=False,
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, invited_by={self.invited_by})>"
