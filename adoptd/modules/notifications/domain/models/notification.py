"""
Notification models.

Permission follows the browser vocabulary clients already speak:
``default`` until the user answers, then ``granted`` or ``denied``.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class NotificationPermission(str, Enum):
    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class Notification(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    body: Optional[str] = None
    tag: Optional[str] = None
    created_at: datetime


class NotificationSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_supported: bool = True
    permission: NotificationPermission = NotificationPermission.DEFAULT
    pending: List[Notification] = []
