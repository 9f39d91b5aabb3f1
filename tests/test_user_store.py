import pytest
from conftest import make_profile

from summit_invites.features.users.models.user import UserStatus
from summit_invites.platform.exceptions import AccountAlreadyExists


@pytest.mark.asyncio
async def test_create_and_lookup(user_store):
    user = await user_store.create(
        make_profile("Ada@Example.com", companyWebsite="https://engines.example.com"),
        invited_by=None,
    )

    assert user.email == "ada@example.com"
    assert user.status == UserStatus.REGISTERED
    assert user.company_website == "https://engines.example.com/"
    assert user.full_name == "Ada Lovelace"
    assert (await user_store.get_by_email("ADA@example.com")).id == user.id
    assert await user_store.get("missing") is None


@pytest.mark.asyncio
async def test_duplicate_email_is_rejected(user_store):
    await user_store.create(make_profile("ada@example.com"), invited_by=None)

    with pytest.raises(AccountAlreadyExists):
        await user_store.create(make_profile("ada@example.com"), invited_by=None)


@pytest.mark.asyncio
async def test_counts(user_store):
    root = await user_store.create(make_profile("root@example.com"), invited_by=None)
    await user_store.create(make_profile("child@example.com"), invited_by=root.id)

    assert await user_store.count_registered() == 2
    assert await user_store.count_referred() == 1
    assert len(await user_store.list_all()) == 2
