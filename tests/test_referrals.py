import pytest
from conftest import make_profile

from summit_invites.platform.config import settings


@pytest.mark.asyncio
async def test_referral_tree_one_level(orchestrator, code_store, referral_reader):
    root_code = await code_store.create_one(settings.ADMIN_SENTINEL_OWNER)
    root = (await orchestrator.register(make_profile("root@example.com"), root_code.code)).user

    root_codes = await code_store.list_by_owner(root.id)
    child_a = (await orchestrator.register(make_profile("a@example.com"), root_codes[0].code)).user
    child_b = (await orchestrator.register(make_profile("b@example.com"), root_codes[1].code)).user

    child_a_codes = await code_store.list_by_owner(child_a.id)
    grandchild = (
        await orchestrator.register(make_profile("g@example.com"), child_a_codes[0].code)
    ).user

    invitees = await referral_reader.get_direct_invitees(root.id)
    assert {u.id for u in invitees} == {child_a.id, child_b.id}
    assert grandchild.id not in {u.id for u in invitees}

    assert (await referral_reader.get_inviter(grandchild.id)).id == child_a.id
    assert await referral_reader.get_inviter(root.id) is None


@pytest.mark.asyncio
async def test_user_without_invitees(referral_reader, user_store):
    user = await user_store.create(make_profile("solo@example.com"), invited_by=None)

    assert await referral_reader.get_direct_invitees(user.id) == []
