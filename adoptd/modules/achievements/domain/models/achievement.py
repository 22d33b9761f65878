# 📄 File: adoptd/modules/achievements/domain/models/achievement.py
# 🧭 Purpose (Layman Explanation):
# Describes badges (achievements) people earn by using the app, the titles those badges
# unlock, and which title someone is currently showing next to their name.
# 🧪 Purpose (Technical Summary):
# Achievement/Title catalog entries, per-user unlock records, recorded user action types
# and the requirement view models for the "how to earn" catalog.
# 🔗 Dependencies:
# pydantic, enum, datetime, typing
# 🔄 Connected Modules / Calls From:
# AchievementState, achievements repository implementation, forum author badges, achievements endpoints

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ActionType(str, Enum):
    """Values written to ``user_actions.action_type``"""
    POST_CREATED = "post_created"
    COMMENT_CREATED = "comment_created"
    POST_LIKED = "post_liked"
    COMMENT_LIKED = "comment_liked"
    PLANT_SCANNED = "plant_scanned"
    CHATBOT_MESSAGE_SENT = "chatbot_message_sent"


class Achievement(BaseModel):
    """Static catalog entry: reach ``required_count`` of ``required_action``."""

    id: str
    name: str
    description: Optional[str] = None
    icon_name: Optional[str] = None
    required_action: str
    required_count: int = 1


class UserAchievement(BaseModel):
    id: str
    user_id: str
    achievement_id: str
    unlocked_at: Optional[datetime] = None
    progress: Optional[int] = None
    achievement: Optional[Achievement] = None


class Title(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    required_achievement_id: Optional[str] = None


class UserTitle(BaseModel):
    id: str
    user_id: str
    title_id: str
    equipped: bool = False
    title: Optional[Title] = None


class AchievementSnapshot(BaseModel):
    """Unlocks of the signed-in user."""

    model_config = ConfigDict(frozen=True)

    user_achievements: List[UserAchievement] = []
    user_titles: List[UserTitle] = []

    @property
    def equipped_title(self) -> Optional[UserTitle]:
        return next((ut for ut in self.user_titles if ut.equipped), None)

    def has_achievement(self, achievement_id: str) -> bool:
        return any(ua.achievement_id == achievement_id for ua in self.user_achievements)

    def has_title(self, title_id: str) -> bool:
        return any(ut.title_id == title_id for ut in self.user_titles)


class AchievementRequirement(BaseModel):
    achievement: Achievement
    unlocked: bool
    requirement: str


class TitleRequirement(BaseModel):
    """
    ``special`` titles are granted by administrators; they carry no requirement text.
    """

    title: Title
    unlocked: bool
    special: bool = False
    requirement: Optional[str] = None


class RequirementCatalog(BaseModel):
    achievements: List[AchievementRequirement]
    titles: List[TitleRequirement]
