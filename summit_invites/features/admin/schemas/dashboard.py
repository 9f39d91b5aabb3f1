from pydantic import BaseModel, ConfigDict, Field


class AdminStatsResponse(BaseModel):
    total_users: int = Field(alias="totalUsers")
    active_codes: int = Field(alias="activeCodes")
    waitlist_count: int = Field(alias="waitlistCount")
    total_referrals: int = Field(alias="totalReferrals")

    model_config = ConfigDict(populate_by_name=True)
