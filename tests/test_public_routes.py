import pytest
from conftest import make_profile

from summit_invites.platform.config import settings
from summit_invites.platform.services.recaptcha import RecaptchaResult


def registration_payload(email: str, invite_code: str) -> dict:
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": email,
        "company": "Analytical Engines",
        "companyRevenue": "$1mi-$3mi",
        "role": "Founder",
        "companyWebsite": "",
        "inviteCode": invite_code,
        "recaptchaToken": "token",
    }


def waitlist_payload(email: str) -> dict:
    return {
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": email,
        "company": "Compilers Inc",
        "companyRevenue": "$5mi+",
        "role": "CEO",
        "motivation": "I want to meet other founders building developer tools.",
        "recaptchaToken": "token",
    }


@pytest.mark.asyncio
async def test_validate_code(client, code_store):
    code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)

    ok = await client.post("/api/validate-code", json={"code": code.code.lower()})
    bad = await client.post("/api/validate-code", json={"code": "SUMMITNOPE00"})

    assert ok.status_code == 200
    assert ok.json()["data"] == {"valid": True}
    assert bad.status_code == 400
    assert bad.json()["message"] == "Invalid or expired invitation code"
    assert bad.json()["status"] == "error"


@pytest.mark.asyncio
async def test_register_returns_user_codes_and_token(client, code_store, notifier):
    code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)

    response = await client.post("/api/register", json=registration_payload("ada@example.com", code.code))

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["email"] == "ada@example.com"
    assert data["user"]["invited_by"] is None
    assert len(data["codes"]) == settings.CODE_BATCH_SIZE
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    # Background tasks run once the response is sent.
    assert notifier.send.await_count == 2


@pytest.mark.asyncio
async def test_register_twice_with_same_code(client, code_store):
    code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)

    first = await client.post("/api/register", json=registration_payload("one@example.com", code.code))
    second = await client.post("/api/register", json=registration_payload("two@example.com", code.code))

    assert first.status_code == 201
    assert second.status_code == 400
    assert second.json()["message"] == "Invalid or expired invitation code"


@pytest.mark.asyncio
async def test_register_blocked_by_bot_check(client, code_store, verifier):
    verifier.verify.return_value = RecaptchaResult(is_valid=False, error="reCAPTCHA score too low")
    code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)

    response = await client.post("/api/register", json=registration_payload("ada@example.com", code.code))

    assert response.status_code == 400
    assert response.json()["message"] == "reCAPTCHA score too low"
    assert await code_store.validate(code.code) is not None


@pytest.mark.asyncio
async def test_register_validation_error(client):
    payload = registration_payload("not-an-email", "SUMMITAAAAAA")

    response = await client.post("/api/register", json=payload)

    assert response.status_code == 422
    assert response.json()["status"] == "error"


@pytest.mark.asyncio
async def test_join_waitlist(client, notifier):
    response = await client.post("/api/waitlist", json=waitlist_payload("grace@example.com"))
    duplicate = await client.post("/api/waitlist", json=waitlist_payload("grace@example.com"))

    assert response.status_code == 201
    assert response.json()["data"]["priority_score"] == 90
    assert duplicate.status_code == 400
    assert duplicate.json()["message"] == "Email already registered or in waitlist"


@pytest.mark.asyncio
async def test_dashboard_requires_token(client):
    response = await client.get("/api/me")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_dashboard_lists_codes_and_referrals(client, orchestrator, code_store, user_token):
    root_code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)
    root = await orchestrator.register(make_profile("root@example.com"), root_code.code)
    await orchestrator.register(make_profile("child@example.com"), root.codes[0].code)

    response = await client.get(
        "/api/me", headers={"Authorization": f"Bearer {user_token(root.user.id)}"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == root.user.id
    assert len(data["invite_codes"]) == settings.CODE_BATCH_SIZE
    assert [c["code"] for c in data["used_codes"]] == [root.codes[0].code]
    assert len(data["referrals"]) == 1


@pytest.mark.asyncio
async def test_send_invitation(client, orchestrator, code_store, notifier, user_token):
    root_code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)
    root = await orchestrator.register(make_profile("root@example.com"), root_code.code)
    headers = {"Authorization": f"Bearer {user_token(root.user.id)}"}

    response = await client.post(
        "/api/send-invitation",
        json={"email": "friend@example.com", "personalMessage": "Join me"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["data"]["sent_to"] == "friend@example.com"
    assert response.json()["data"]["sent_code"] in {c.code for c in root.codes}


@pytest.mark.asyncio
async def test_send_invitation_delivery_failure(client, orchestrator, code_store, notifier, user_token):
    root_code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)
    root = await orchestrator.register(make_profile("root@example.com"), root_code.code)
    notifier.send.return_value = False

    response = await client.post(
        "/api/send-invitation",
        json={"email": "friend@example.com"},
        headers={"Authorization": f"Bearer {user_token(root.user.id)}"},
    )

    assert response.status_code == 502
    assert response.json()["message"] == "Failed to send invitation email"


@pytest.mark.asyncio
async def test_admin_token_cannot_use_user_endpoints(client, admin_headers):
    response = await client.get("/api/me", headers=admin_headers)

    assert response.status_code == 401
