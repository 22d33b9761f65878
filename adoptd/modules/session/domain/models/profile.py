"""Display profile of a user: name, occupation and avatar."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    """
    Row of the ``users`` table as seen by its owner.

    ``occupation`` is fed into AI prompts so advice matches the user's background.
    """

    user_id: str
    name: Optional[str] = None
    occupation: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str = "user"
    subscription_tier_id: int = 0
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name or "Пользователь"


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    occupation: Optional[str] = Field(None, max_length=200)
