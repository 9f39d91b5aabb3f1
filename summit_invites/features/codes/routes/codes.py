from fastapi import APIRouter, Depends, status

from summit_invites.features.auth.utils.auth import get_current_user
from summit_invites.features.codes.schemas.invitation_code import (
    SendInvitationRequest,
    ValidateCodeRequest,
)
from summit_invites.features.codes.services.code_store import CodeStore
from summit_invites.features.registration.services.registration import RegistrationOrchestrator
from summit_invites.features.users.models.user import User
from summit_invites.platform.dependencies import get_code_store, get_orchestrator
from summit_invites.platform.exceptions import InvalidInvitationCode
from summit_invites.platform.response import api_response

router = APIRouter(prefix="/api", tags=["Invitation Codes"])


@router.post("/validate-code", status_code=status.HTTP_200_OK)
async def validate_code(payload: ValidateCodeRequest, codes: CodeStore = Depends(get_code_store)):
    """Read-only check used by the landing page before showing the registration form."""
    if await codes.validate(payload.code) is None:
        raise InvalidInvitationCode()

    return api_response(data={"valid": True}, message="Code is valid")


@router.post("/send-invitation", status_code=status.HTTP_200_OK)
async def send_invitation(
    payload: SendInvitationRequest,
    current_user: User = Depends(get_current_user),
    orchestrator: RegistrationOrchestrator = Depends(get_orchestrator),
):
    code = await orchestrator.send_referral_invitation(
        current_user.id, payload.email, payload.personal_message
    )

    return api_response(
        data={"sent_code": code.code, "sent_to": payload.email},
        message="Invitation sent successfully",
    )
