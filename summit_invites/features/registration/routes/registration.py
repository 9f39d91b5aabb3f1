from fastapi import APIRouter, BackgroundTasks, Depends, status

from summit_invites.features.auth.utils.security import create_access_token
from summit_invites.features.codes.schemas.invitation_code import InvitationCodeOut
from summit_invites.features.registration.schemas.registration import RegistrationRequest
from summit_invites.features.registration.services.registration import RegistrationOrchestrator
from summit_invites.features.users.schemas.user import UserOut
from summit_invites.features.waitlist.schemas.waitlist import WaitlistSubmitRequest
from summit_invites.platform.dependencies import get_orchestrator, get_recaptcha_verifier
from summit_invites.platform.response import api_response
from summit_invites.platform.services.recaptcha import RecaptchaVerifier, require_human

router = APIRouter(prefix="/api", tags=["Registration"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegistrationRequest,
    background_tasks: BackgroundTasks,
    orchestrator: RegistrationOrchestrator = Depends(get_orchestrator),
    verifier: RecaptchaVerifier = Depends(get_recaptcha_verifier),
):
    """
    Redeem an invitation code and create the account.

    The response carries the new user's own codes and a bearer token for
    the dashboard endpoints.
    """
    await require_human(verifier, payload.recaptcha_token, "register")

    result = await orchestrator.register(payload, payload.invite_code, background_tasks)
    access_token = create_access_token(data={"sub": result.user.id, "email": result.user.email})

    return api_response(
        data={
            "user": UserOut.model_validate(result.user),
            "codes": [InvitationCodeOut.model_validate(c) for c in result.codes],
            "access_token": access_token,
            "token_type": "bearer",
        },
        message="Registration successful",
        status_code=status.HTTP_201_CREATED,
    )


@router.post("/waitlist", status_code=status.HTTP_201_CREATED)
async def join_waitlist(
    payload: WaitlistSubmitRequest,
    background_tasks: BackgroundTasks,
    orchestrator: RegistrationOrchestrator = Depends(get_orchestrator),
    verifier: RecaptchaVerifier = Depends(get_recaptcha_verifier),
):
    await require_human(verifier, payload.recaptcha_token, "waitlist")

    entry = await orchestrator.join_waitlist(payload, background_tasks)

    return api_response(
        data={"id": entry.id, "priority_score": entry.priority_score},
        message="Successfully added to waitlist",
        status_code=status.HTTP_201_CREATED,
    )
