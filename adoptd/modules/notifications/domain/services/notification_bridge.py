# 📄 File: adoptd/modules/notifications/domain/services/notification_bridge.py
# 🧭 Purpose (Layman Explanation):
# Holds the user's answer to "may we notify you?" and queues the notifications the app
# wants to show, making sure the same reminder doesn't pop up twice.
# 🧪 Purpose (Technical Summary):
# Per-scope notification bridge. send() is a no-op unless permission is granted and
# drops a notification whose tag is still live (renotify disabled). Delivered
# notifications sit in an outbox that clients drain over the API.
# 🔗 Dependencies:
# StateService primitives, notification models, settings, logging
# 🔄 Connected Modules / Calls From:
# ReminderState poller, notifications endpoints, UserScope

from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Deque, Dict, List, Optional, Union

from adoptd.modules.notifications.domain.models.notification import (
    Notification,
    NotificationPermission,
    NotificationSnapshot,
)
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.observable import Readiness, StateService
from adoptd.shared.utils.helpers import utc_now
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)

OUTBOX_LIMIT = 100


class NotificationBridge(StateService[NotificationSnapshot]):
    """
    Permission state plus a tag-deduplicated outbox of local notifications.
    """

    name = "notifications"

    def __init__(self, readiness: Optional[Readiness] = None, settings: Optional[Settings] = None,
                 clock: Callable[[], datetime] = utc_now):
        super().__init__(readiness)
        self.settings = settings or get_settings()
        self._clock = clock
        self._permission = NotificationPermission.DEFAULT
        self._outbox: Deque[Notification] = deque(maxlen=OUTBOX_LIMIT)
        self._live_tags: Dict[str, datetime] = {}

    @property
    def is_supported(self) -> bool:
        return True

    @property
    def permission(self) -> NotificationPermission:
        return self._permission

    @property
    def snapshot(self) -> NotificationSnapshot:
        return NotificationSnapshot(
            is_supported=self.is_supported,
            permission=self._permission,
            pending=list(self._outbox),
        )

    async def refresh(self) -> NotificationSnapshot:
        self._prune_tags()
        return self.snapshot

    async def request_permission(self, decision: Union[NotificationPermission, str]) -> NotificationPermission:
        """Record the user's answer to the permission prompt."""
        self._permission = NotificationPermission(decision)
        logger.info(f"Notification permission set to {self._permission.value}")
        await self.broadcast()
        return self._permission

    async def send(self, title: str, body: Optional[str] = None, tag: Optional[str] = None) -> bool:
        """
        Queue a notification.

        Returns:
            False when permission is not granted or the tag is still live
        """
        if self._permission is not NotificationPermission.GRANTED:
            return False

        now = self._clock()
        self._prune_tags(now)
        if tag is not None and tag in self._live_tags:
            logger.debug(f"Notification with tag {tag} already delivered")
            return False

        self._outbox.append(Notification(title=title, body=body, tag=tag, created_at=now))
        if tag is not None:
            self._live_tags[tag] = now + timedelta(seconds=self.settings.NOTIFICATION_TAG_TTL)
        await self.broadcast()
        return True

    def drain(self) -> List[Notification]:
        """Hand queued notifications to the client and empty the outbox."""
        delivered = list(self._outbox)
        self._outbox.clear()
        return delivered

    def _prune_tags(self, now: Optional[datetime] = None):
        now = now or self._clock()
        self._live_tags = {tag: expires for tag, expires in self._live_tags.items() if expires > now}
