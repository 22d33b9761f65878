"""Subscription tier and daily usage data access interface."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, Optional

from adoptd.modules.entitlement.domain.models.entitlement import UsageAction


class EntitlementRepository(ABC):
    """
    Abstract repository interface for tier and usage counters.
    """

    @abstractmethod
    async def get_tier_id(self, user_id: str) -> int:
        """``users.subscription_tier_id``; 0 when the row is missing."""
        pass

    @abstractmethod
    async def get_usage(self, user_id: str, day: date) -> Optional[Dict[str, Any]]:
        """Usage row for the given day, or None when nothing was used yet."""
        pass

    @abstractmethod
    async def increment_usage(self, user_id: str, day: date, action: UsageAction) -> None:
        """Atomically increment one counter on the remote side."""
        pass
