import os
import re
from typing import Optional

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from summit_invites.features.notifications.models.email_log import EmailLog, EmailStatus
from summit_invites.platform.config import settings
from summit_invites.platform.logger import get_logger

logger = get_logger("email_service")

template_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "../templates/email")

env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(["html"]),
)

# template key -> (subject, template file)
EMAIL_TEMPLATES = {
    "waitlist_confirmation": ("Application Received - The Summit 25", "waitlist_confirmation.html"),
    "waitlist_promotion": ("You've Been Selected for The Summit 25!", "waitlist_promotion.html"),
    "registration_confirmation": ("Registration Confirmed - The Summit 25", "registration_confirmation.html"),
    "referral_codes": ("Your Invitation Codes - The Summit 25", "referral_codes.html"),
    "referral_invitation": (
        "{referrerName} has shared exclusive access to The Summit 25 with you",
        "referral_invitation.html",
    ),
}

_TAG_RE = re.compile(r"<[^>]+>")


def render_email(template_key: str, variables: dict) -> tuple[str, str]:
    """Return (subject, html) for a template key."""
    subject_template, template_file = EMAIL_TEMPLATES[template_key]
    subject = subject_template.format(
        referrerName=variables.get("referrerName") or "Someone",
    )
    html = env.get_template(template_file).render(app_name=settings.APP_NAME, **variables)
    return subject, html


def strip_html(html: str) -> str:
    return re.sub(r"\s+", " ", _TAG_RE.sub(" ", html)).strip()


class EmailNotifier:
    """
    Notification sender backed by the Brevo transactional email API.

    ``send`` never raises: every outcome is reported as a boolean and
    recorded in ``email_logs``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session_factory = session_factory
        self.transport = transport

    async def send(self, template_key: str, recipient: str, variables: dict) -> bool:
        try:
            subject, html = render_email(template_key, variables)
        except Exception as e:
            logger.error(f"Could not render email template {template_key}: {e}")
            await self._log(recipient, template_key, template_key, EmailStatus.FAILED, str(e))
            return False

        if not settings.BREVO_API_KEY:
            logger.warning(f"Email to {recipient} not sent - Brevo API key not configured")
            await self._log(recipient, subject, template_key, EmailStatus.FAILED, "API key not configured")
            return False

        payload = {
            "sender": {"email": settings.MAIL_FROM_ADDRESS, "name": settings.MAIL_FROM_NAME},
            "to": [{"email": recipient}],
            "subject": subject,
            "htmlContent": html,
            "textContent": strip_html(html),
        }
        headers = {"api-key": settings.BREVO_API_KEY, "Content-Type": "application/json"}

        try:
            async with httpx.AsyncClient(
                timeout=settings.EMAIL_TIMEOUT, transport=self.transport
            ) as client:
                response = await client.post(settings.BREVO_API_URL, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"Email {template_key} to {recipient} failed: {e}")
            await self._log(recipient, subject, template_key, EmailStatus.FAILED, str(e))
            return False

        if response.is_success:
            try:
                message_id = response.json().get("messageId", "")
            except ValueError:
                message_id = ""
            logger.info(f"Email {template_key} sent to {recipient}")
            await self._log(recipient, subject, template_key, EmailStatus.SENT, f"Brevo sent: {message_id}")
            return True

        logger.warning(f"Email {template_key} to {recipient} rejected: {response.status_code}")
        await self._log(
            recipient, subject, template_key, EmailStatus.FAILED, f"Brevo error: {response.text}"
        )
        return False

    async def _log(
        self,
        recipient: str,
        subject: str,
        template_key: str,
        status: str,
        error_message: Optional[str] = None,
    ) -> None:
        try:
            async with self.session_factory() as session:
                session.add(
                    EmailLog(
                        to_email=recipient,
                        from_email=settings.MAIL_FROM_ADDRESS,
                        subject=subject,
                        template_type=template_key,
                        status=status,
                        error_message=error_message,
                    )
                )
                await session.commit()
        except Exception as e:
            # Best-effort audit row.
            logger.error(f"Failed to log email to {recipient}: {e}")
