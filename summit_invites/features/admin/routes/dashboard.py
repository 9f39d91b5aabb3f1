from fastapi import APIRouter, BackgroundTasks, Depends, status

from summit_invites.features.admin.services.dashboard import AdminDashboardService
from summit_invites.features.admin.utils.auth import get_current_admin
from summit_invites.features.codes.schemas.invitation_code import (
    GenerateCodesRequest,
    InvitationCodeOut,
)
from summit_invites.features.codes.services.code_store import CodeStore
from summit_invites.features.registration.services.registration import RegistrationOrchestrator
from summit_invites.features.users.schemas.user import UserOut
from summit_invites.features.users.services.user_store import UserStore
from summit_invites.features.waitlist.schemas.waitlist import (
    WaitlistEntryOut,
    WaitlistPriorityUpdate,
)
from summit_invites.features.waitlist.services.waitlist import PromoteResult, WaitlistStore
from summit_invites.platform.dependencies import (
    get_code_store,
    get_orchestrator,
    get_user_store,
    get_waitlist_store,
)
from summit_invites.platform.exceptions import (
    WaitlistEntryAlreadyPromoted,
    WaitlistEntryNotFound,
)
from summit_invites.platform.response import api_response

router = APIRouter(tags=["Admin - Dashboard"], dependencies=[Depends(get_current_admin)])


@router.get("/stats", summary="Get dashboard statistics")
async def get_dashboard_stats(
    codes: CodeStore = Depends(get_code_store),
    users: UserStore = Depends(get_user_store),
    waitlist: WaitlistStore = Depends(get_waitlist_store),
):
    """
    Totals for the admin console:
    - Registered users
    - Active (unused) codes
    - Pending waitlist entries
    - Users who joined through a referral
    """
    stats = await AdminDashboardService(codes, users, waitlist).get_dashboard_stats()

    return api_response(data=stats, message="Dashboard statistics retrieved successfully")


@router.get("/waitlist", summary="List pending waitlist entries by priority")
async def list_waitlist(waitlist: WaitlistStore = Depends(get_waitlist_store)):
    entries = await waitlist.list_pending()

    return api_response(
        data=[WaitlistEntryOut.model_validate(e) for e in entries],
        message="Waitlist retrieved successfully",
    )


@router.post("/waitlist/{entry_id}/promote", summary="Promote a waitlist entry")
async def promote_waitlist_entry(
    entry_id: str,
    background_tasks: BackgroundTasks,
    orchestrator: RegistrationOrchestrator = Depends(get_orchestrator),
):
    promotion = await orchestrator.promote_waitlist_entry(entry_id, background_tasks)

    return api_response(
        data={
            "entry": WaitlistEntryOut.model_validate(promotion.entry),
            "code": promotion.code.code,
        },
        message="User promoted from waitlist",
    )


@router.post("/waitlist/{entry_id}/reject", summary="Reject a waitlist entry")
async def reject_waitlist_entry(entry_id: str, waitlist: WaitlistStore = Depends(get_waitlist_store)):
    outcome = await waitlist.reject(entry_id)
    if outcome.result is PromoteResult.NOT_FOUND:
        raise WaitlistEntryNotFound()
    if outcome.result is PromoteResult.ALREADY_PROMOTED:
        raise WaitlistEntryAlreadyPromoted()

    return api_response(
        data=WaitlistEntryOut.model_validate(outcome.entry),
        message="Waitlist entry rejected",
    )


@router.patch("/waitlist/{entry_id}", summary="Adjust priority score or notes")
async def update_waitlist_entry(
    entry_id: str,
    payload: WaitlistPriorityUpdate,
    waitlist: WaitlistStore = Depends(get_waitlist_store),
):
    entry = await waitlist.update_priority(entry_id, payload.priority_score, payload.admin_notes)
    if entry is None:
        raise WaitlistEntryNotFound()

    return api_response(
        data=WaitlistEntryOut.model_validate(entry),
        message="Waitlist entry updated",
    )


@router.get("/codes", summary="List all invitation codes")
async def list_codes(codes: CodeStore = Depends(get_code_store)):
    all_codes = await codes.list_all()

    return api_response(
        data=[InvitationCodeOut.model_validate(c) for c in all_codes],
        message="Invitation codes retrieved successfully",
    )


@router.post(
    "/codes/generate",
    status_code=status.HTTP_201_CREATED,
    summary="Generate invitation codes for a user or the admin pool",
)
async def generate_codes(
    payload: GenerateCodesRequest,
    orchestrator: RegistrationOrchestrator = Depends(get_orchestrator),
):
    issued = await orchestrator.issue_codes(payload.user_id, payload.count)

    return api_response(
        data={"codes": [c.code for c in issued]},
        message=f"Generated {len(issued)} codes",
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/users", summary="List registered users")
async def list_users(users: UserStore = Depends(get_user_store)):
    all_users = await users.list_all()

    return api_response(
        data=[UserOut.model_validate(u) for u in all_users],
        message="Users retrieved successfully",
    )
