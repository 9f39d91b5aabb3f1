import secrets
import string
from typing import Awaitable, Callable, Optional

from summit_invites.platform.config import settings
from summit_invites.platform.exceptions import CodeSpaceExhausted
from summit_invites.platform.logger import get_logger

logger = get_logger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def canonicalize(code: str) -> str:
    """Codes are case-insensitive; storage and lookups use the uppercase form."""
    return code.strip().upper()


def generate_candidate(prefix: Optional[str] = None, length: Optional[int] = None) -> str:
    prefix = settings.CODE_PREFIX if prefix is None else prefix
    length = settings.CODE_RANDOM_LENGTH if length is None else length
    return canonicalize(prefix) + "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


async def generate_unique_code(
    exists: Callable[[str], Awaitable[bool]],
    max_attempts: Optional[int] = None,
    generator: Callable[[], str] = generate_candidate,
) -> str:
    """
    Draws candidates until ``exists`` reports one as free.

    Raises CodeSpaceExhausted once ``max_attempts`` candidates have all
    collided. Callers must not retry: it means the prefix or length needs
    widening.
    """
    max_attempts = settings.CODE_MAX_ATTEMPTS if max_attempts is None else max_attempts

    for _ in range(max_attempts):
        candidate = generator()
        if not await exists(candidate):
            return candidate

    logger.critical(
        f"Invitation code space exhausted: {max_attempts} collisions in a row "
        f"for prefix {settings.CODE_PREFIX!r}"
    )
    raise CodeSpaceExhausted()
