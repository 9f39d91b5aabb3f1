from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator

from summit_invites.features.waitlist.utils.priority import CompanyRevenue


class UserProfile(BaseModel):
    """Profile fields collected at registration."""

    first_name: str = Field(min_length=1, alias="firstName")
    last_name: str = Field(min_length=1, alias="lastName")
    email: EmailStr
    company: str = Field(min_length=1)
    company_revenue: CompanyRevenue = Field(alias="companyRevenue")
    role: str = Field(min_length=1)
    company_website: Optional[HttpUrl] = Field(default=None, alias="companyWebsite")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("company_website", mode="before")
    @classmethod
    def empty_website_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class UserOut(BaseModel):
    id: str
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    company_revenue: Optional[str] = None
    role: Optional[str] = None
    company_website: Optional[str] = None
    status: str
    invited_by: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InviteeOut(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
