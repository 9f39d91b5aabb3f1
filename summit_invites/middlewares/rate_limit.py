import time

from fastapi import Request, status
from redis.asyncio import Redis
from starlette.middleware.base import BaseHTTPMiddleware

from summit_invites.platform.config import settings
from summit_invites.platform.logger import get_logger
from summit_invites.platform.response import api_response

logger = get_logger(__name__)

WINDOW_SECONDS = 60


def _too_many_requests(retry_after: int):
    response = api_response(
        message="Too Many Requests - Rate limit exceeded.",
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
    )
    response.headers["Retry-After"] = str(max(retry_after, 0))
    return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window limits per (client IP, path) for the endpoints listed in
    ``settings.RATE_LIMITS``. Counters live in Redis; the in-memory store is
    used when FORCE_IN_MEMORY_RATE_LIMITER is set (tests, single process).
    """

    def __init__(self, app, redis: Redis | None = None):
        super().__init__(app)
        self.redis = redis
        self.memory_store: dict[str, tuple[int, float]] = {}

    def _prune_expired(self, now: float) -> None:
        expired = [key for key, (_, expiry) in self.memory_store.items() if now > expiry]
        for key in expired:
            del self.memory_store[key]

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "testclient"

        if client_ip in settings.WHITELIST_IPS:
            return await call_next(request)

        path = request.url.path
        limit = settings.RATE_LIMITS.get(path)

        if limit is None or request.method == "OPTIONS":
            return await call_next(request)

        if settings.FORCE_IN_MEMORY_RATE_LIMITER:
            key = f"{client_ip}:{path}"
            now = time.time()
            self._prune_expired(now)
            count, expiry = self.memory_store.get(key, (0, now + WINDOW_SECONDS))

            if count >= limit:
                logger.info(f"Rate limit hit for {client_ip} on {path}")
                return _too_many_requests(int(expiry - now))

            self.memory_store[key] = (count + 1, expiry)
            return await call_next(request)

        if self.redis is None:
            self.redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)

        key = f"rl:{client_ip}:{path}"
        current_count = await self.redis.incr(key)
        if current_count == 1:
            await self.redis.expire(key, WINDOW_SECONDS)

        if current_count > limit:
            ttl = await self.redis.ttl(key)
            logger.info(f"Rate limit hit for {client_ip} on {path}")
            return _too_many_requests(ttl)

        return await call_next(request)
