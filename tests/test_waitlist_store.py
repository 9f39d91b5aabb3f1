import asyncio
from datetime import timedelta

import pytest
from conftest import make_submission
from pydantic import ValidationError
from sqlalchemy import update

from summit_invites.features.waitlist.models.waitlist import WaitlistEntry, WaitlistStatus
from summit_invites.features.waitlist.services.waitlist import PromoteResult
from summit_invites.platform.exceptions import AlreadyOnWaitlist
from summit_invites.platform.utils.clock import utcnow


@pytest.mark.asyncio
async def test_submit_stamps_priority_score(waitlist_store):
    entry = await waitlist_store.submit(make_submission("grace@example.com"))

    assert entry.id
    assert entry.status == WaitlistStatus.PENDING
    assert entry.priority_score == 90
    assert entry.company_revenue == "$5mi+"


@pytest.mark.asyncio
async def test_submit_normalizes_email_and_rejects_duplicates(waitlist_store):
    entry = await waitlist_store.submit(make_submission("Grace@Example.com"))
    assert entry.email == "grace@example.com"

    with pytest.raises(AlreadyOnWaitlist):
        await waitlist_store.submit(make_submission("grace@example.com"))


def test_submission_requires_a_real_motivation():
    with pytest.raises(ValidationError):
        make_submission("short@example.com", motivation="too short")


def test_submission_rejects_unknown_revenue_band():
    with pytest.raises(ValidationError):
        make_submission("band@example.com", companyRevenue="$10bn")


def test_blank_website_is_treated_as_missing():
    submission = make_submission("site@example.com", companyWebsite="  ")
    assert submission.company_website is None


@pytest.mark.asyncio
async def test_list_pending_orders_by_score_then_age(waitlist_store, session_factory):
    low = await waitlist_store.submit(
        make_submission("low@example.com", companyRevenue="$100k-$500k", role="Engineer")
    )
    late_high = await waitlist_store.submit(make_submission("late@example.com"))
    early_high = await waitlist_store.submit(make_submission("early@example.com"))

    now = utcnow()
    async with session_factory() as session:
        await session.execute(
            update(WaitlistEntry)
            .where(WaitlistEntry.id == early_high.id)
            .values(created_at=now - timedelta(hours=2))
        )
        await session.execute(
            update(WaitlistEntry)
            .where(WaitlistEntry.id == late_high.id)
            .values(created_at=now - timedelta(hours=1))
        )
        await session.commit()

    pending = await waitlist_store.list_pending()

    assert [e.id for e in pending] == [early_high.id, late_high.id, low.id]


@pytest.mark.asyncio
async def test_list_pending_excludes_processed_entries(waitlist_store):
    promoted = await waitlist_store.submit(make_submission("a@example.com"))
    rejected = await waitlist_store.submit(make_submission("b@example.com"))
    waiting = await waitlist_store.submit(make_submission("c@example.com"))

    await waitlist_store.promote(promoted.id)
    await waitlist_store.reject(rejected.id)

    assert [e.id for e in await waitlist_store.list_pending()] == [waiting.id]
    assert await waitlist_store.count_pending() == 1


@pytest.mark.asyncio
async def test_promote_reports_each_outcome(waitlist_store):
    entry = await waitlist_store.submit(make_submission("grace@example.com"))

    first = await waitlist_store.promote(entry.id)
    second = await waitlist_store.promote(entry.id)
    missing = await waitlist_store.promote("does-not-exist")

    assert first.result is PromoteResult.PROMOTED
    assert first.entry.status == WaitlistStatus.PROMOTED
    assert first.entry.promoted_at is not None
    assert second.result is PromoteResult.ALREADY_PROMOTED
    assert missing.result is PromoteResult.NOT_FOUND


@pytest.mark.asyncio
async def test_concurrent_promotions_promote_once(waitlist_store):
    entry = await waitlist_store.submit(make_submission("grace@example.com"))

    results = await asyncio.gather(*(waitlist_store.promote(entry.id) for _ in range(4)))

    outcomes = [r.result for r in results]
    assert outcomes.count(PromoteResult.PROMOTED) == 1
    assert outcomes.count(PromoteResult.ALREADY_PROMOTED) == 3


@pytest.mark.asyncio
async def test_update_priority_sets_score_and_notes(waitlist_store):
    entry = await waitlist_store.submit(make_submission("grace@example.com"))

    updated = await waitlist_store.update_priority(entry.id, 120, "Keynote speaker")

    assert updated.priority_score == 120
    assert updated.admin_notes == "Keynote speaker"
    assert await waitlist_store.update_priority("missing", 5) is None
