from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ValidateCodeRequest(BaseModel):
    code: str = Field(min_length=1, max_length=64)


class InvitationCodeOut(BaseModel):
    id: str
    code: str
    assigned_to_user_id: Optional[str] = None
    used_by_user_id: Optional[str] = None
    is_used: bool
    expires_at: Optional[datetime] = None
    reserved_for_email: Optional[str] = None
    reserved_at: Optional[datetime] = None
    used_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SendInvitationRequest(BaseModel):
    email: EmailStr
    personal_message: Optional[str] = Field(default=None, max_length=1000, alias="personalMessage")

    model_config = ConfigDict(populate_by_name=True)


class GenerateCodesRequest(BaseModel):
    user_id: str = Field(min_length=1, alias="userId")
    count: int = Field(default=5, ge=1, le=50)

    model_config = ConfigDict(populate_by_name=True)
