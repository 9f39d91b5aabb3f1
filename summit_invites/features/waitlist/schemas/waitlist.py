from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator

from summit_invites.features.waitlist.utils.priority import CompanyRevenue


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class WaitlistSubmission(BaseModel):
    first_name: str = Field(min_length=1, alias="firstName")
    last_name: str = Field(min_length=1, alias="lastName")
    email: EmailStr
    company: str = Field(min_length=1)
    company_revenue: CompanyRevenue = Field(alias="companyRevenue")
    role: str = Field(min_length=1)
    company_website: Optional[HttpUrl] = Field(default=None, alias="companyWebsite")
    motivation: str = Field(min_length=10)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("company_website", mode="before")
    @classmethod
    def empty_website_is_none(cls, v):
        return _blank_to_none(v)

    @field_validator("motivation")
    @classmethod
    def motivation_has_detail(cls, v: str) -> str:
        if len(v.strip()) < 10:
            raise ValueError("Please provide more details about your motivation")
        return v.strip()


class WaitlistSubmitRequest(WaitlistSubmission):
    recaptcha_token: Optional[str] = Field(default=None, alias="recaptchaToken")


class WaitlistPriorityUpdate(BaseModel):
    priority_score: int = Field(ge=0, alias="priorityScore")
    admin_notes: Optional[str] = Field(default=None, alias="adminNotes")

    model_config = ConfigDict(populate_by_name=True)


class WaitlistEntryOut(BaseModel):
    id: str
    email: EmailStr
    first_name: str
    last_name: str
    company: str
    company_revenue: str
    role: str
    company_website: Optional[str] = None
    motivation: str
    priority_score: int
    status: str
    admin_notes: Optional[str] = None
    created_at: datetime
    promoted_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
