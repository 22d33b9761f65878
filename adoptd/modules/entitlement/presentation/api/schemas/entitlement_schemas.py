from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from adoptd.modules.entitlement.domain.models.entitlement import Plan


class UsageCounter(BaseModel):
    used: int
    limit: Optional[int] = None
    remaining: Optional[int] = None


class UsageResponse(BaseModel):
    tier: str
    is_premium: bool
    date: date
    scans: UsageCounter
    chat_messages: UsageCounter


class PlansResponse(BaseModel):
    current_tier: str
    plans: List[Plan]
    upgrade_available: bool
