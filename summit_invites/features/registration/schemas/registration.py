from typing import Optional

from pydantic import Field

from summit_invites.features.users.schemas.user import UserProfile


class RegistrationRequest(UserProfile):
    invite_code: str = Field(min_length=1, alias="inviteCode")
    recaptcha_token: Optional[str] = Field(default=None, alias="recaptchaToken")
