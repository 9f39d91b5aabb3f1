import functools

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from summit_invites.platform.exceptions import StoreUnavailable
from summit_invites.platform.logger import get_logger

logger = get_logger(__name__)

UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError, ConnectionError, OSError)


def store_operation(func):
    """Turns connectivity failures raised by a store coroutine into ``StoreUnavailable``.

    Integrity and programming errors pass through untouched; only the
    "database is unreachable or busy" family is retryable.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except UNAVAILABLE_ERRORS as exc:
            logger.exception(f"Store operation {func.__qualname__} failed", exc_info=exc)
            raise StoreUnavailable() from exc

    return wrapper
