import sqlalchemy
from sqlalchemy import Column, String, Text

from summit_invites.platform.db.base import Base, new_id


class EmailStatus:
    SENT = "sent"
    FAILED = "failed"


class EmailLog(Base):
    """Append-only audit of every notification attempt."""

    __tablename__ = "email_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    to_email = Column(String(255), nullable=False, index=True)
    from_email = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    template_type = Column(String(64), nullable=False)
    status = Column(String(20), nullable=False)
    error_message = Column(Text, nullable=True)
    sent_at = Column(
        sqlalchemy.DateTime(timezone=True), server_default=sqlalchemy.func.now(), nullable=False
    )
