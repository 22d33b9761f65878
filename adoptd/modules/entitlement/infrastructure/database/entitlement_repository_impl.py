# 📄 File: adoptd/modules/entitlement/infrastructure/database/entitlement_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# Reads the user's plan and today's usage from Supabase and asks the server to add one
# to a counter.
# 🧪 Purpose (Technical Summary):
# Supabase implementation of EntitlementRepository: users.subscription_tier_id,
# usage_limits rows keyed by (user_id, date), and the increment_usage_limit RPC.
# 🔗 Dependencies:
# supabase async client, SupabaseRepository base
# 🔄 Connected Modules / Calls From:
# EntitlementState via UserScope construction

from datetime import date
from typing import Any, Dict, Optional

from supabase import AsyncClient

from adoptd.modules.entitlement.domain.models.entitlement import UsageAction
from adoptd.modules.entitlement.domain.repositories.entitlement_repository import EntitlementRepository
from adoptd.shared.infrastructure.database.supabase_repository import SupabaseRepository


class EntitlementRepositoryImpl(SupabaseRepository, EntitlementRepository):
    """
    Supabase implementation of entitlement repository.
    """

    def __init__(self, client: AsyncClient):
        super().__init__(client)

    async def get_tier_id(self, user_id: str) -> int:
        row = await self._first(
            "users:tier",
            self.table("users").select("subscription_tier_id").eq("user_id", user_id),
        )
        if not row:
            return 0
        return row.get("subscription_tier_id") or 0

    async def get_usage(self, user_id: str, day: date) -> Optional[Dict[str, Any]]:
        return await self._first(
            "usage_limits:today",
            self.table("usage_limits")
            .select("scans_count, chatbot_messages_count, date")
            .eq("user_id", user_id)
            .eq("date", day.isoformat()),
        )

    async def increment_usage(self, user_id: str, day: date, action: UsageAction) -> None:
        await self._rpc("increment_usage_limit", {
            "p_user_id": user_id,
            "p_date": day.isoformat(),
            "p_column_name": action.column,
        })
