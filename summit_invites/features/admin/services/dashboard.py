from summit_invites.features.admin.schemas.dashboard import AdminStatsResponse
from summit_invites.features.codes.services.code_store import CodeStore
from summit_invites.features.users.services.user_store import UserStore
from summit_invites.features.waitlist.services.waitlist import WaitlistStore


class AdminDashboardService:
    def __init__(self, codes: CodeStore, users: UserStore, waitlist: WaitlistStore):
        self.codes = codes
        self.users = users
        self.waitlist = waitlist

    async def get_dashboard_stats(self) -> AdminStatsResponse:
        return AdminStatsResponse(
            total_users=await self.users.count_registered(),
            active_codes=await self.codes.count_active(),
            waitlist_count=await self.waitlist.count_pending(),
            total_referrals=await self.users.count_referred(),
        )
