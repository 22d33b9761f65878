"""
Achievement Repository Implementation

Supabase tables: achievements, titles, user_achievements, user_titles,
user_actions. Grants and daily logins are remote procedures; their logic
lives on the server.
"""

from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from adoptd.modules.achievements.domain.models.achievement import (
    Achievement,
    ActionType,
    Title,
    UserAchievement,
    UserTitle,
)
from adoptd.modules.achievements.domain.repositories.achievement_repository import AchievementRepository
from adoptd.shared.infrastructure.database.supabase_repository import SupabaseRepository


class AchievementRepositoryImpl(SupabaseRepository, AchievementRepository):
    """
    Supabase implementation of the AchievementRepository interface.
    """

    def __init__(self, client: AsyncClient):
        super().__init__(client)

    async def list_achievements(self) -> List[Achievement]:
        rows = await self._execute("achievements:list", self.table("achievements").select("*"))
        return [self._to_achievement(row) for row in rows or []]

    async def list_titles(self) -> List[Title]:
        rows = await self._execute("titles:list", self.table("titles").select("*"))
        return [self._to_title(row) for row in rows or []]

    async def get_user_achievements(self, user_id: str) -> List[UserAchievement]:
        rows = await self._execute(
            "user_achievements:list",
            self.table("user_achievements").select("*, achievement:achievements(*)").eq("user_id", user_id),
        )
        return [
            UserAchievement(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                achievement_id=str(row["achievement_id"]),
                unlocked_at=row.get("unlocked_at"),
                progress=row.get("progress"),
                achievement=self._to_achievement(row["achievement"]) if row.get("achievement") else None,
            )
            for row in rows or []
        ]

    async def get_user_titles(self, user_id: str) -> List[UserTitle]:
        rows = await self._execute(
            "user_titles:list",
            self.table("user_titles").select("*, title:titles(*)").eq("user_id", user_id),
        )
        return [
            UserTitle(
                id=str(row["id"]),
                user_id=str(row["user_id"]),
                title_id=str(row["title_id"]),
                equipped=bool(row.get("equipped")),
                title=self._to_title(row["title"]) if row.get("title") else None,
            )
            for row in rows or []
        ]

    async def record_action(self, user_id: str, action_type: ActionType, target_id: Optional[str] = None) -> None:
        payload = {"user_id": user_id, "action_type": action_type.value}
        if target_id:
            payload["target_id"] = target_id
        await self._execute("user_actions:insert", self.table("user_actions").insert(payload))

    async def grant_achievements(self, user_id: str) -> None:
        await self._rpc("check_and_grant_achievements", {"p_user_id": user_id})

    async def grant_titles(self, user_id: str) -> None:
        await self._rpc("check_and_grant_titles", {"p_user_id": user_id})

    async def record_daily_login(self, user_id: str) -> None:
        await self._rpc("record_daily_login", {"p_user_id": user_id})

    async def clear_equipped(self, user_id: str) -> None:
        await self._execute(
            "user_titles:unequip",
            self.table("user_titles").update({"equipped": False}).eq("user_id", user_id),
        )

    async def set_equipped(self, user_id: str, title_id: str) -> None:
        await self._execute(
            "user_titles:equip",
            self.table("user_titles").update({"equipped": True}).eq("user_id", user_id).eq("title_id", title_id),
        )

    @staticmethod
    def _to_achievement(row: Dict[str, Any]) -> Achievement:
        return Achievement(
            id=str(row["id"]),
            name=row["name"],
            description=row.get("description"),
            icon_name=row.get("icon_name"),
            required_action=row.get("required_action") or "",
            required_count=row.get("required_count") or 1,
        )

    @staticmethod
    def _to_title(row: Dict[str, Any]) -> Title:
        required = row.get("required_achievement_id")
        return Title(
            id=str(row["id"]),
            name=row["name"],
            description=row.get("description"),
            required_achievement_id=str(required) if required else None,
        )
