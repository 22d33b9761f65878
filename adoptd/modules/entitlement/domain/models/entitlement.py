# 📄 File: adoptd/modules/entitlement/domain/models/entitlement.py
# 🧭 Purpose (Layman Explanation):
# Describes which plan a user is on (free or premium) and how many scans and chat
# messages they have used today.
# 🧪 Purpose (Technical Summary):
# Entitlement domain models: subscription tier, metered actions, the per-day usage
# snapshot (valid only for its UTC date) and the plan descriptions for the pricing page.
# 🔗 Dependencies:
# pydantic, enum, datetime
# 🔄 Connected Modules / Calls From:
# EntitlementState, entitlement repository implementation, pricing and usage endpoints

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class Tier(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class UsageAction(str, Enum):
    """Metered actions and the usage_limits column each one increments."""
    SCAN = "scan"
    CHAT = "chat"

    @property
    def column(self) -> str:
        return "scans_count" if self is UsageAction.SCAN else "chatbot_messages_count"


class EntitlementSnapshot(BaseModel):
    """
    Tier plus today's usage counters.

    Counters belong to ``date``; a snapshot from an earlier day reads as zero usage.
    """

    model_config = ConfigDict(frozen=True)

    tier: Tier = Tier.FREE
    scans_count: int = 0
    chat_messages_count: int = 0
    date: dt.date

    @property
    def is_premium(self) -> bool:
        return self.tier == Tier.PREMIUM

    def count(self, action: UsageAction) -> int:
        if action is UsageAction.SCAN:
            return self.scans_count
        return self.chat_messages_count

    def for_day(self, day: dt.date) -> "EntitlementSnapshot":
        if self.date == day:
            return self
        return EntitlementSnapshot(tier=self.tier, date=day)

    def incremented(self, action: UsageAction) -> "EntitlementSnapshot":
        if action is UsageAction.SCAN:
            return self.model_copy(update={"scans_count": self.scans_count + 1})
        return self.model_copy(update={"chat_messages_count": self.chat_messages_count + 1})


class Plan(BaseModel):
    """Pricing page entry; payments are not processed here."""

    tier: Tier
    name: str
    daily_scans: Optional[int] = None
    daily_chat_messages: Optional[int] = None
    weather_forecast_days: int = 0
    features: List[str] = []
