"""Imports every mapped model so ``Base.metadata`` knows all tables."""

from summit_invites.features.codes.models.invitation_code import InvitationCode
from summit_invites.features.notifications.models.email_log import EmailLog
from summit_invites.features.users.models.user import User
from summit_invites.features.waitlist.models.waitlist import WaitlistEntry
from summit_invites.platform.db.base import Base

__all__ = ["Base", "InvitationCode", "EmailLog", "User", "WaitlistEntry"]
