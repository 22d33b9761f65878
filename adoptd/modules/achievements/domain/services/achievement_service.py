# 📄 File: adoptd/modules/achievements/domain/services/achievement_service.py
# 🧭 Purpose (Layman Explanation):
# After you post, comment, like, scan or chat, this asks the server whether you earned
# a new badge or title, and keeps your list of unlocks and your chosen title up to date.
# 🧪 Purpose (Technical Summary):
# Observable achievement state. check_and_grant runs the achievement RPC, then the
# dependent title RPC, then re-fetches unlocks; failures are logged (background
# reconciliation). Equip is a clear-then-set pair serialized by a local asyncio.Lock.
# 🔗 Dependencies:
# AchievementRepository, SessionState, StateService primitives, requirement texts, settings
# 🔄 Connected Modules / Calls From:
# Forum state, plant scanner, chat consultant, UserScope startup (daily login), achievements endpoints

import asyncio
from typing import List, Optional, Union

from adoptd.modules.achievements.domain.models.achievement import (
    Achievement,
    AchievementRequirement,
    AchievementSnapshot,
    ActionType,
    RequirementCatalog,
    Title,
    TitleRequirement,
    UserAchievement,
    UserTitle,
)
from adoptd.modules.achievements.domain.repositories.achievement_repository import AchievementRepository
from adoptd.modules.achievements.domain.services.requirements import (
    SPECIAL_CONDITIONS,
    describe_action,
    describe_title_requirement,
)
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import ExternalAPIError, NotFoundError
from adoptd.shared.core.observable import StateService
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)


class AchievementState(StateService[AchievementSnapshot]):
    """
    Tracks the signed-in user's unlocked achievements and titles.
    """

    name = "achievements"

    def __init__(self, session: SessionState, repository: AchievementRepository,
                 settings: Optional[Settings] = None):
        super().__init__(session.readiness, session.tasks)
        self.session = session
        self.repository = repository
        self.settings = settings or get_settings()
        self._snapshot = AchievementSnapshot()
        self._achievements: Optional[List[Achievement]] = None
        self._titles: Optional[List[Title]] = None
        self._equip_lock = asyncio.Lock()

    @property
    def snapshot(self) -> AchievementSnapshot:
        return self._snapshot

    @property
    def equipped_title(self) -> Optional[UserTitle]:
        return self._snapshot.equipped_title

    async def start(self):
        """Load unlocks and record today's login once the session resolved."""
        if await self.readiness.wait():
            await self.refresh()
            await self.record_daily_login()

    async def refresh(self) -> AchievementSnapshot:
        user = self.session.require_user()
        token = self._freshness.issue()
        self.loading = True
        try:
            user_achievements = await self.repository.get_user_achievements(user.user_id)
            user_titles = await self.repository.get_user_titles(user.user_id)
        finally:
            self.loading = False

        if not self._freshness.is_current(token):
            logger.debug("Discarding stale achievements fetch")
            return self._snapshot

        self._snapshot = AchievementSnapshot(
            user_achievements=user_achievements,
            user_titles=user_titles,
        )
        await self.broadcast()
        return self._snapshot

    async def check_and_grant(self):
        """
        Reconcile grants after a qualifying action.

        Safe to call when nothing new was earned.
        """
        user = self.session.snapshot
        if user is None:
            return
        try:
            await self.repository.grant_achievements(user.user_id)
            await self.repository.grant_titles(user.user_id)
            await self.refresh()
        except ExternalAPIError as e:
            logger.error(f"Achievement reconciliation failed: {e.message}", user_id=user.user_id)

    async def record_action(self, action_type: Union[ActionType, str], target_id: Optional[str] = None):
        user = self.session.require_user()
        action_type = ActionType(action_type)
        await self.repository.record_action(user.user_id, action_type, target_id)
        logger.log_user_action(action_type.value, user.user_id, resource=target_id)

    async def record_and_reconcile(self, action_type: Union[ActionType, str], target_id: Optional[str] = None):
        """
        Record a completed action and reconcile grants.

        The action itself already succeeded, so failures here are logged only.
        """
        try:
            await self.record_action(action_type, target_id)
        except ExternalAPIError as e:
            logger.error(f"Recording {action_type} failed: {e.message}")
            return
        await self.check_and_grant()

    async def record_daily_login(self):
        user = self.session.snapshot
        if user is None:
            return
        try:
            await self.repository.record_daily_login(user.user_id)
        except ExternalAPIError as e:
            logger.error(f"Daily login record failed: {e.message}", user_id=user.user_id)
            return
        await self.check_and_grant()

    async def equip_title(self, title_id: str) -> Optional[UserTitle]:
        """
        Clear every equipped title, then mark exactly the target.

        Serialized per scope; the last call wins.
        """
        user = self.session.require_user()
        async with self._equip_lock:
            if not self._snapshot.has_title(title_id):
                await self.refresh()
                if not self._snapshot.has_title(title_id):
                    raise NotFoundError(
                        message="Title is not unlocked",
                        resource_type="title",
                        resource_id=title_id,
                    )

            try:
                await self.repository.clear_equipped(user.user_id)
                await self.repository.set_equipped(user.user_id, title_id)
            except ExternalAPIError as e:
                logger.error(f"Equipping title {title_id} failed: {e.message}", user_id=user.user_id)
                await self._reconcile_equipped()
                raise
            self._set_local_equipped(title_id)
            await self.broadcast()
            await self.refresh()

        logger.log_user_action("title_equipped", user.user_id, resource=title_id)
        return self.equipped_title

    async def unequip_title(self):
        user = self.session.require_user()
        async with self._equip_lock:
            try:
                await self.repository.clear_equipped(user.user_id)
            except ExternalAPIError as e:
                logger.error(f"Unequipping titles failed: {e.message}", user_id=user.user_id)
                await self._reconcile_equipped()
                raise
            self._set_local_equipped(None)
            await self.broadcast()
            await self.refresh()

    async def _reconcile_equipped(self):
        # server may hold zero equipped titles after a partial clear/set
        try:
            await self.refresh()
        except ExternalAPIError as e:
            logger.error(f"Title re-fetch after equip failure failed: {e.message}")

    async def load_catalog(self, force: bool = False):
        if force or self._achievements is None or self._titles is None:
            self._achievements = await self.repository.list_achievements()
            self._titles = await self.repository.list_titles()
        return self._achievements, self._titles

    async def catalog_requirements(self) -> RequirementCatalog:
        """
        Catalog with requirement text; administrator-granted titles carry none.
        """
        achievements, titles = await self.load_catalog()
        by_id = {a.id: a for a in achievements}
        special_names = set(self.settings.admin_only_titles)

        achievement_rows = [
            AchievementRequirement(
                achievement=a,
                unlocked=self._snapshot.has_achievement(a.id),
                requirement=describe_action(a.required_action, a.required_count),
            )
            for a in achievements
        ]

        title_rows = []
        for title in titles:
            special = title.name in special_names
            if special:
                requirement = None
            elif title.required_achievement_id and title.required_achievement_id in by_id:
                requirement = describe_title_requirement(by_id[title.required_achievement_id].name)
            else:
                requirement = SPECIAL_CONDITIONS
            title_rows.append(TitleRequirement(
                title=title,
                unlocked=self._snapshot.has_title(title.id),
                special=special,
                requirement=requirement,
            ))

        return RequirementCatalog(achievements=achievement_rows, titles=title_rows)

    async def get_user_achievements(self, user_id: str) -> List[UserAchievement]:
        """Another user's unlocks; errors yield an empty list."""
        try:
            return await self.repository.get_user_achievements(user_id)
        except ExternalAPIError as e:
            logger.error(f"Fetching achievements of {user_id} failed: {e.message}")
            return []

    async def get_user_titles(self, user_id: str) -> List[UserTitle]:
        try:
            return await self.repository.get_user_titles(user_id)
        except ExternalAPIError as e:
            logger.error(f"Fetching titles of {user_id} failed: {e.message}")
            return []

    def _set_local_equipped(self, title_id: Optional[str]):
        self._freshness.issue()
        self._snapshot = AchievementSnapshot(
            user_achievements=self._snapshot.user_achievements,
            user_titles=[
                ut.model_copy(update={"equipped": ut.title_id == title_id})
                for ut in self._snapshot.user_titles
            ],
        )
