from fastapi import APIRouter, Depends

from summit_invites.features.auth.utils.auth import get_current_user
from summit_invites.features.codes.schemas.invitation_code import InvitationCodeOut
from summit_invites.features.codes.services.code_store import CodeStore
from summit_invites.features.users.models.user import User
from summit_invites.features.users.schemas.user import InviteeOut, UserOut
from summit_invites.features.users.services.referrals import ReferralGraphReader
from summit_invites.platform.dependencies import get_code_store, get_referral_reader
from summit_invites.platform.response import api_response

router = APIRouter(prefix="/api", tags=["Users"])


@router.get("/me")
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    codes: CodeStore = Depends(get_code_store),
    referrals: ReferralGraphReader = Depends(get_referral_reader),
):
    invite_codes = await codes.list_by_owner(current_user.id)
    used_codes = await codes.list_used_by_owner(current_user.id)
    invitees = await referrals.get_direct_invitees(current_user.id)

    return api_response(
        data={
            "user": UserOut.model_validate(current_user),
            "invite_codes": [InvitationCodeOut.model_validate(c) for c in invite_codes],
            "used_codes": [InvitationCodeOut.model_validate(c) for c in used_codes],
            "referrals": [InviteeOut.model_validate(u) for u in invitees],
        },
        message="Dashboard retrieved successfully",
    )
