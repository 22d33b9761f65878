from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from adoptd.modules.reminders.domain.models.reminder import Reminder


class ReminderRepository(ABC):
    """
    Abstract repository interface for care reminders.
    """

    @abstractmethod
    async def list_reminders(self, user_id: str) -> List[Reminder]:
        """All reminders of the user, soonest first."""
        pass

    @abstractmethod
    async def create_reminder(self, user_id: str, reminder_text: str,
                              diagnosis_text: Optional[str], scheduled_for: datetime) -> Reminder:
        pass

    @abstractmethod
    async def mark_complete(self, reminder_id: str, user_id: str) -> None:
        pass
