"""
Reminder domain models.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Reminder(BaseModel):
    """
    Scheduled care reminder. ``completed`` only ever moves to True.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    reminder_text: str
    diagnosis_text: Optional[str] = None
    scheduled_for: datetime
    completed: bool = False
    created_at: Optional[datetime] = None

    def is_due(self, now: datetime, tolerance_seconds: float) -> bool:
        """Not completed and scheduled within ``tolerance_seconds`` of now, inclusive."""
        if self.completed:
            return False
        return abs((now - self.scheduled_for).total_seconds()) <= tolerance_seconds


class ReminderCreate(BaseModel):
    reminder_text: str = Field(..., min_length=1, max_length=1000)
    diagnosis_text: Optional[str] = Field(None, max_length=10000)
    delay_days: int = Field(..., ge=0, le=365)
