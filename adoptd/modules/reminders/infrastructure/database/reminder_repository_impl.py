"""
Reminder Repository Implementation

Supabase table: reminders. Rows are scoped to their owner on every write.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from supabase import AsyncClient

from adoptd.modules.reminders.domain.models.reminder import Reminder
from adoptd.modules.reminders.domain.repositories.reminder_repository import ReminderRepository
from adoptd.shared.core.exceptions import GatewayError
from adoptd.shared.infrastructure.database.supabase_repository import SupabaseRepository


class ReminderRepositoryImpl(SupabaseRepository, ReminderRepository):

    def __init__(self, client: AsyncClient):
        super().__init__(client)

    async def list_reminders(self, user_id: str) -> List[Reminder]:
        rows = await self._execute(
            "reminders:list",
            self.table("reminders")
            .select("*")
            .eq("user_id", user_id)
            .order("scheduled_for", desc=False),
        )
        return [self._to_domain(row) for row in rows or []]

    async def create_reminder(self, user_id: str, reminder_text: str,
                              diagnosis_text: Optional[str], scheduled_for: datetime) -> Reminder:
        rows = await self._execute(
            "reminders:insert",
            self.table("reminders").insert({
                "user_id": user_id,
                "reminder_text": reminder_text,
                "diagnosis_text": diagnosis_text,
                "scheduled_for": scheduled_for.isoformat(),
            }),
        )
        if not rows:
            raise GatewayError("reminders:insert", "no row returned")
        return self._to_domain(rows[0])

    async def mark_complete(self, reminder_id: str, user_id: str) -> None:
        await self._execute(
            "reminders:complete",
            self.table("reminders")
            .update({"completed": True})
            .eq("id", reminder_id)
            .eq("user_id", user_id),
        )

    @staticmethod
    def _to_domain(row: Dict[str, Any]) -> Reminder:
        return Reminder(
            id=str(row["id"]),
            user_id=str(row["user_id"]),
            reminder_text=row.get("reminder_text") or "",
            diagnosis_text=row.get("diagnosis_text"),
            scheduled_for=row["scheduled_for"],
            completed=bool(row.get("completed")),
            created_at=row.get("created_at"),
        )
