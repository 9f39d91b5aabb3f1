from dataclasses import dataclass
from typing import Optional

import httpx

from summit_invites.platform.config import settings
from summit_invites.platform.exceptions import BotCheckFailed
from summit_invites.platform.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RecaptchaResult:
    """Outcome of a reCAPTCHA v3 token check."""

    is_valid: bool
    score: Optional[float] = None
    error: Optional[str] = None


class RecaptchaVerifier:
    """Verifies reCAPTCHA v3 tokens against Google's siteverify endpoint."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        min_score: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.RECAPTCHA_SECRET_KEY
        self.min_score = min_score if min_score is not None else settings.RECAPTCHA_MIN_SCORE
        self.transport = transport

    async def verify(self, token: Optional[str], expected_action: str) -> RecaptchaResult:
        """
        Check ``token`` for ``expected_action``.

        Args:
            token: The token produced by the frontend widget.
            expected_action: Action name the token should carry (e.g. 'register').

        Returns:
            RecaptchaResult. A missing secret, a missing token, a failed
            verification, a low score or an unreachable service all yield
            ``is_valid=False``; an action mismatch is only logged.
        """
        if not self.secret_key:
            logger.warning("reCAPTCHA secret key not configured")
            return RecaptchaResult(is_valid=False, error="reCAPTCHA configuration error")

        if not token:
            return RecaptchaResult(is_valid=False, error="reCAPTCHA token is required")

        try:
            async with httpx.AsyncClient(timeout=10, transport=self.transport) as client:
                response = await client.post(
                    settings.RECAPTCHA_VERIFY_URL,
                    data={"secret": self.secret_key, "response": token},
                )
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"reCAPTCHA verification error: {e}")
            return RecaptchaResult(is_valid=False, error="reCAPTCHA verification service error")

        if not data.get("success"):
            logger.warning(f"reCAPTCHA verification failed: {data.get('error-codes')}")
            return RecaptchaResult(is_valid=False, error="reCAPTCHA verification failed")

        if data.get("action") != expected_action:
            logger.warning(
                f"reCAPTCHA action mismatch. Expected: {expected_action}, Got: {data.get('action')}"
            )

        score = float(data.get("score") or 0)
        if score < self.min_score:
            logger.warning(f"reCAPTCHA score too low: {score} (minimum: {self.min_score})")
            return RecaptchaResult(is_valid=False, score=score, error="reCAPTCHA score too low")

        return RecaptchaResult(is_valid=True, score=score)


async def require_human(verifier: RecaptchaVerifier, token: Optional[str], action: str) -> RecaptchaResult:
    """Raise BotCheckFailed unless ``token`` passes for ``action``."""
    result = await verifier.verify(token, action)
    if not result.is_valid:
        raise BotCheckFailed(result.error)
    return result
