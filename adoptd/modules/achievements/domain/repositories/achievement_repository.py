# 📄 File: adoptd/modules/achievements/domain/repositories/achievement_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists what we can ask the server about badges and titles: the full catalog, what a
# user has unlocked, recording what they did, and choosing which title to show.
# 🧪 Purpose (Technical Summary):
# Abstract repository interface for achievement/title catalog reads, per-user unlock
# reads, user action inserts, the grant/daily-login RPCs and the equip updates.
# 🔗 Dependencies:
# abc, typing, achievement domain models
# 🔄 Connected Modules / Calls From:
# AchievementState, AchievementRepositoryImpl, in-memory test fakes

from abc import ABC, abstractmethod
from typing import List, Optional

from adoptd.modules.achievements.domain.models.achievement import (
    Achievement,
    ActionType,
    Title,
    UserAchievement,
    UserTitle,
)


class AchievementRepository(ABC):
    """
    Abstract repository interface for achievements and titles.
    """

    @abstractmethod
    async def list_achievements(self) -> List[Achievement]:
        pass

    @abstractmethod
    async def list_titles(self) -> List[Title]:
        pass

    @abstractmethod
    async def get_user_achievements(self, user_id: str) -> List[UserAchievement]:
        """Unlock records joined with their catalog entry."""
        pass

    @abstractmethod
    async def get_user_titles(self, user_id: str) -> List[UserTitle]:
        """Title unlocks joined with their catalog entry."""
        pass

    @abstractmethod
    async def record_action(self, user_id: str, action_type: ActionType, target_id: Optional[str] = None) -> None:
        pass

    @abstractmethod
    async def grant_achievements(self, user_id: str) -> None:
        """Remote scan of recorded actions against catalog thresholds."""
        pass

    @abstractmethod
    async def grant_titles(self, user_id: str) -> None:
        """Dependent pass: titles gated by held achievements."""
        pass

    @abstractmethod
    async def record_daily_login(self, user_id: str) -> None:
        pass

    @abstractmethod
    async def clear_equipped(self, user_id: str) -> None:
        """Set ``equipped = false`` on every title of the user."""
        pass

    @abstractmethod
    async def set_equipped(self, user_id: str, title_id: str) -> None:
        pass
