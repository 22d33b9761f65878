# 📄 File: adoptd/modules/entitlement/domain/services/entitlement_service.py
# 🧭 Purpose (Layman Explanation):
# The gatekeeper for scans and chat messages: premium users always pass, free users
# get 7 scans and 10 chat messages a day, and the count goes up the moment they use one.
# 🧪 Purpose (Technical Summary):
# Observable entitlement state. check_and_increment is the single gate before any
# metered operation: it bumps the local counter synchronously before its first await,
# so concurrent calls on the event loop cannot race past the quota. Premium increments
# run as logged background tasks; a failed free-tier increment re-fetches usage.
# 🔗 Dependencies:
# EntitlementRepository, SessionState, StateService primitives, settings, logging
# 🔄 Connected Modules / Calls From:
# Plant scanner, chat consultant, weather endpoint (forecast gating), usage/pricing endpoints

from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Union

from adoptd.modules.entitlement.domain.models.entitlement import (
    EntitlementSnapshot,
    Plan,
    Tier,
    UsageAction,
)
from adoptd.modules.entitlement.domain.repositories.entitlement_repository import EntitlementRepository
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import ExternalAPIError
from adoptd.shared.core.observable import StateService
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class EntitlementState(StateService[EntitlementSnapshot]):
    """
    Tracks subscription tier and daily usage counters; gates metered features.
    """

    name = "entitlement"

    def __init__(
        self,
        session: SessionState,
        repository: EntitlementRepository,
        settings: Optional[Settings] = None,
        today: Callable[[], date] = utc_today,
    ):
        super().__init__(session.readiness, session.tasks)
        self.session = session
        self.repository = repository
        self.settings = settings or get_settings()
        self._today = today
        self._snapshot = EntitlementSnapshot(date=today())
        self._in_flight: Dict[UsageAction, int] = {action: 0 for action in UsageAction}

    @property
    def snapshot(self) -> EntitlementSnapshot:
        return self._snapshot.for_day(self._today())

    @property
    def is_premium(self) -> bool:
        return self._snapshot.is_premium

    def quota(self, action: Union[UsageAction, str]) -> Optional[int]:
        """Daily limit for the action; None means unlimited."""
        if self.is_premium:
            return None
        if UsageAction(action) is UsageAction.SCAN:
            return self.settings.FREE_DAILY_SCANS
        return self.settings.FREE_DAILY_CHAT_MESSAGES

    def can_perform(self, action: Union[UsageAction, str]) -> bool:
        action = UsageAction(action)
        if self.is_premium:
            return True
        return self.snapshot.count(action) < self.quota(action)

    async def check_and_increment(self, action: Union[UsageAction, str]) -> bool:
        """
        Gate a metered action and count it.

        Returns:
            bool: True when the action may proceed
        """
        action = UsageAction(action)
        user = self.session.require_user()
        today = self._today()
        self._snapshot = self._snapshot.for_day(today)

        if self.is_premium:
            self._bump(action)
            self.tasks.spawn(
                self.repository.increment_usage(user.user_id, today, action),
                name=f"increment_usage:{action.value}",
            )
            await self.broadcast()
            return True

        if not self.can_perform(action):
            logger.info(
                f"Usage limit reached for action: {action.value}",
                user_id=user.user_id,
                count=self._snapshot.count(action),
            )
            return False

        # local bump before the first await
        self._bump(action)
        self._in_flight[action] += 1
        try:
            await self.repository.increment_usage(user.user_id, today, action)
        except ExternalAPIError as e:
            self._in_flight[action] -= 1
            logger.error(f"Usage increment failed for {action.value}: {e.message}", user_id=user.user_id)
            await self._reconcile_after_failure(action, today)
            return False
        self._in_flight[action] -= 1

        await self.broadcast()
        return True

    async def refresh(self) -> EntitlementSnapshot:
        """Re-read tier and today's usage row."""
        user = self.session.require_user()
        token = self._freshness.issue()
        self.loading = True
        today = self._today()
        try:
            tier_id = await self.repository.get_tier_id(user.user_id)
            usage = await self.repository.get_usage(user.user_id, today)
        finally:
            self.loading = False

        if not self._freshness.is_current(token):
            logger.debug("Discarding stale entitlement fetch")
            return self.snapshot

        # the server row does not include increments still awaiting a response
        self._snapshot = EntitlementSnapshot(
            tier=Tier.PREMIUM if tier_id == self.settings.PREMIUM_TIER_ID else Tier.FREE,
            scans_count=((usage or {}).get("scans_count") or 0) + self._in_flight[UsageAction.SCAN],
            chat_messages_count=(
                ((usage or {}).get("chatbot_messages_count") or 0) + self._in_flight[UsageAction.CHAT]
            ),
            date=today,
        )
        await self.broadcast()
        return self._snapshot

    def plans(self) -> List[Plan]:
        return [
            Plan(
                tier=Tier.FREE,
                name="Free",
                daily_scans=self.settings.FREE_DAILY_SCANS,
                daily_chat_messages=self.settings.FREE_DAILY_CHAT_MESSAGES,
                weather_forecast_days=0,
                features=["plant_scanner", "chatbot", "current_weather", "forum", "reminders"],
            ),
            Plan(
                tier=Tier.PREMIUM,
                name="Premium",
                weather_forecast_days=self.settings.WEATHER_FORECAST_DAYS,
                features=[
                    "unlimited_scans",
                    "unlimited_chatbot",
                    "weather_forecast",
                    "forecast_care_advice",
                    "forum",
                    "reminders",
                ],
            ),
        ]

    def _bump(self, action: UsageAction):
        self._freshness.issue()
        self._snapshot = self._snapshot.incremented(action)

    async def _reconcile_after_failure(self, action: UsageAction, today: date):
        try:
            await self.refresh()
        except ExternalAPIError as e:
            # counter state unknown; give back only the bump this call made
            logger.error(f"Usage re-fetch failed: {e.message}")
            current = self._snapshot.for_day(today)
            column = "scans_count" if action is UsageAction.SCAN else "chat_messages_count"
            self._snapshot = current.model_copy(
                update={column: max(0, current.count(action) - 1)}
            )
            await self.broadcast()
