import pytest
from conftest import make_profile, make_submission

from summit_invites.platform.config import settings


@pytest.mark.asyncio
async def test_admin_login_and_me(client):
    bad = await client.post("/api/admin/login", json={"username": "summit-admin", "password": "nope"})
    good = await client.post(
        "/api/admin/login", json={"username": "summit-admin", "password": "correct-horse-battery"}
    )

    assert bad.status_code == 401
    assert good.status_code == 200
    token = good.json()["data"]["access_token"]

    me = await client.get("/api/admin/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "summit-admin"

    logout = await client.post("/api/admin/logout", headers={"Authorization": f"Bearer {token}"})
    assert logout.status_code == 200


@pytest.mark.asyncio
async def test_admin_endpoints_reject_user_tokens(client, user_token):
    response = await client.get(
        "/api/admin/stats", headers={"Authorization": f"Bearer {user_token('some-user')}"}
    )
    missing = await client.get("/api/admin/stats")

    assert response.status_code == 401
    assert missing.status_code == 401


@pytest.mark.asyncio
async def test_stats(client, admin_headers, orchestrator, code_store):
    root_code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)
    root = await orchestrator.register(make_profile("root@example.com"), root_code.code)
    await orchestrator.register(make_profile("child@example.com"), root.codes[0].code)
    await orchestrator.join_waitlist(make_submission("waiting@example.com"))

    response = await client.get("/api/admin/stats", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["data"] == {
        "totalUsers": 2,
        "activeCodes": 2 * settings.CODE_BATCH_SIZE - 1,
        "waitlistCount": 1,
        "totalReferrals": 1,
    }


@pytest.mark.asyncio
async def test_waitlist_admin_flow(client, admin_headers, orchestrator):
    high = await orchestrator.join_waitlist(make_submission("high@example.com"))
    low = await orchestrator.join_waitlist(
        make_submission("low@example.com", companyRevenue="$100k-$500k", role="Analyst")
    )

    listing = await client.get("/api/admin/waitlist", headers=admin_headers)
    assert [e["id"] for e in listing.json()["data"]] == [high.id, low.id]

    bumped = await client.patch(
        f"/api/admin/waitlist/{low.id}",
        json={"priorityScore": 200, "adminNotes": "Board member"},
        headers=admin_headers,
    )
    assert bumped.status_code == 200
    assert bumped.json()["data"]["priority_score"] == 200

    promoted = await client.post(f"/api/admin/waitlist/{low.id}/promote", headers=admin_headers)
    assert promoted.status_code == 200
    assert promoted.json()["data"]["code"].startswith("SUMMIT")

    again = await client.post(f"/api/admin/waitlist/{low.id}/promote", headers=admin_headers)
    assert again.status_code == 409

    rejected = await client.post(f"/api/admin/waitlist/{high.id}/reject", headers=admin_headers)
    assert rejected.status_code == 200
    assert rejected.json()["data"]["status"] == "rejected"

    missing = await client.post("/api/admin/waitlist/missing/promote", headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_generate_and_list_codes(client, admin_headers, user_store):
    user = await user_store.create(make_profile("ada@example.com"), invited_by=None)

    generated = await client.post(
        "/api/admin/codes/generate", json={"userId": user.id, "count": 3}, headers=admin_headers
    )
    unknown = await client.post(
        "/api/admin/codes/generate", json={"userId": "ghost", "count": 1}, headers=admin_headers
    )
    listing = await client.get("/api/admin/codes", headers=admin_headers)
    users = await client.get("/api/admin/users", headers=admin_headers)

    assert generated.status_code == 201
    assert len(generated.json()["data"]["codes"]) == 3
    assert unknown.status_code == 404
    assert len(listing.json()["data"]) == 3
    assert [u["email"] for u in users.json()["data"]] == ["ada@example.com"]
