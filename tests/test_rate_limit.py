from types import SimpleNamespace

import pytest

from summit_invites.middlewares import rate_limit
from summit_invites.middlewares.rate_limit import RateLimitMiddleware
from summit_invites.platform.config import settings


@pytest.fixture(autouse=True)
def set_in_memory(monkeypatch):
    """Force in-memory rate limiter for testing."""
    monkeypatch.setattr(settings, "FORCE_IN_MEMORY_RATE_LIMITER", True)
    monkeypatch.setattr(settings, "WHITELIST_IPS", [])


@pytest.mark.asyncio
async def test_validate_code_rate_limit(client):
    limit = settings.RATE_LIMITS["/api/validate-code"]

    for _ in range(limit):
        res = await client.post("/api/validate-code", json={"code": "SUMMITNOPE00"})
        assert res.status_code != 429

    res = await client.post("/api/validate-code", json={"code": "SUMMITNOPE00"})
    assert res.status_code == 429
    assert "Retry-After" in res.headers
    assert res.json()["message"] == "Too Many Requests - Rate limit exceeded."


@pytest.mark.asyncio
async def test_unlimited_paths_are_not_counted(client):
    for _ in range(10):
        res = await client.get("/health")
        assert res.status_code == 200


@pytest.mark.asyncio
async def test_limit_resets_after_the_window(client, monkeypatch):
    limit = settings.RATE_LIMITS["/api/validate-code"]
    clock = {"now": 1_000.0}
    monkeypatch.setattr(rate_limit, "time", SimpleNamespace(time=lambda: clock["now"]))

    for _ in range(limit):
        await client.post("/api/validate-code", json={"code": "SUMMITNOPE00"})
    res = await client.post("/api/validate-code", json={"code": "SUMMITNOPE00"})
    assert res.status_code == 429

    clock["now"] += rate_limit.WINDOW_SECONDS + 1
    res = await client.post("/api/validate-code", json={"code": "SUMMITNOPE00"})
    assert res.status_code != 429


def test_expired_windows_are_dropped_from_memory():
    middleware = RateLimitMiddleware(app=None)
    middleware.memory_store = {
        "1.1.1.1:/api/waitlist": (3, 100.0),
        "2.2.2.2:/api/waitlist": (1, 200.0),
    }

    middleware._prune_expired(150.0)

    assert list(middleware.memory_store) == ["2.2.2.2:/api/waitlist"]
