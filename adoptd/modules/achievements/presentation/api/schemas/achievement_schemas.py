from typing import List, Optional

from pydantic import BaseModel

from adoptd.modules.achievements.domain.models.achievement import (
    AchievementSnapshot,
    UserAchievement,
    UserTitle,
)


class AchievementsResponse(BaseModel):
    user_achievements: List[UserAchievement]
    user_titles: List[UserTitle]
    equipped_title: Optional[UserTitle] = None

    @classmethod
    def from_snapshot(cls, snapshot: AchievementSnapshot) -> "AchievementsResponse":
        return cls(
            user_achievements=snapshot.user_achievements,
            user_titles=snapshot.user_titles,
            equipped_title=snapshot.equipped_title,
        )


class UserBadgesResponse(BaseModel):
    """Another user's unlocks, as shown next to forum posts."""

    user_id: str
    achievements: List[UserAchievement]
    titles: List[UserTitle]
    equipped_title: Optional[UserTitle] = None
