# 📄 File: adoptd/modules/session/domain/models/session.py
# 🧭 Purpose (Layman Explanation):
# Describes who is signed in right now: their id, email, whether they are an admin,
# and the tokens that prove they logged in.
# 🧪 Purpose (Technical Summary):
# Session domain model. A Session is created on a successful credential
# exchange and destroyed on sign-out or token invalidation.
# 🔗 Dependencies:
# pydantic, enum, datetime
# 🔄 Connected Modules / Calls From:
# SessionState, auth repository implementation, UserScope registry, auth endpoints

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Role stored in ``users.role``"""
    USER = "user"
    ADMIN = "admin"


class Session(BaseModel):
    """Authenticated identity of one signed-in user."""

    model_config = ConfigDict(use_enum_values=True)

    user_id: str
    email: Optional[str] = None
    role: UserRole = UserRole.USER
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now.timestamp() >= self.expires_at
