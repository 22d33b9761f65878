# 📄 File: adoptd/modules/reminders/domain/services/reminder_service.py
# 🧭 Purpose (Layman Explanation):
# Keeps the user's plant-care reminders, lets them add one ("water again in 6 days")
# or tick one off, and every half minute checks whether one is due right now.
# 🧪 Purpose (Technical Summary):
# Observable reminder state with a background due-time poller. Each tick scans an
# immutable tuple snapshot; reminders within +/- tolerance of now (inclusive) are sent
# through the notification bridge tagged with their id, so a reminder seen on two
# ticks notifies once. Polling is skipped until notification permission is granted.
# 🔗 Dependencies:
# ReminderRepository, SessionState, NotificationBridge, StateService primitives, settings
# 🔄 Connected Modules / Calls From:
# UserScope (poller lifecycle), reminders endpoints, diagnosis reminder suggestions

import asyncio
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Tuple

from adoptd.modules.notifications.domain.models.notification import NotificationPermission
from adoptd.modules.notifications.domain.services.notification_bridge import NotificationBridge
from adoptd.modules.reminders.domain.models.reminder import Reminder
from adoptd.modules.reminders.domain.repositories.reminder_repository import ReminderRepository
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import NotFoundError, ValidationError
from adoptd.shared.core.observable import StateService
from adoptd.shared.utils.helpers import utc_now
from adoptd.shared.utils.logging import get_logger
from adoptd.shared.utils.validators import require_text

logger = get_logger(__name__)

REMINDER_TITLE = "Напоминание"


class ReminderState(StateService[Tuple[Reminder, ...]]):
    """
    Scheduled care reminders of the signed-in user.
    """

    name = "reminders"

    def __init__(self, session: SessionState, repository: ReminderRepository,
                 notifications: NotificationBridge, settings: Optional[Settings] = None,
                 clock: Callable[[], datetime] = utc_now):
        super().__init__(session.readiness, session.tasks)
        self.session = session
        self.repository = repository
        self.notifications = notifications
        self.settings = settings or get_settings()
        self._clock = clock
        self._reminders: Tuple[Reminder, ...] = ()
        self._poller: Optional[asyncio.Task] = None

    @property
    def snapshot(self) -> Tuple[Reminder, ...]:
        return self._reminders

    @property
    def is_polling(self) -> bool:
        return self._poller is not None and not self._poller.done()

    async def start(self):
        if await self.readiness.wait():
            await self.refresh()
            self.start_polling()

    async def refresh(self) -> Tuple[Reminder, ...]:
        user = self.session.require_user()
        token = self._freshness.issue()
        self.loading = True
        try:
            reminders = await self.repository.list_reminders(user.user_id)
        finally:
            self.loading = False

        if self._freshness.is_current(token):
            self._reminders = tuple(reminders)
            await self.broadcast()
        return self._reminders

    async def create_reminder(self, reminder_text: str, diagnosis_text: Optional[str],
                              delay_days: int) -> Reminder:
        user = self.session.require_user()
        reminder_text = require_text(reminder_text, "reminder_text", 1000)
        if delay_days < 0:
            raise ValidationError(
                message="Delay must not be negative",
                field="delay_days",
                value=delay_days,
                constraint=">= 0",
            )

        scheduled_for = self._clock() + timedelta(days=delay_days)
        reminder = await self.repository.create_reminder(
            user.user_id, reminder_text, diagnosis_text, scheduled_for
        )
        logger.log_user_action("reminder_created", user.user_id, resource=reminder.id)
        await self.refresh()
        return reminder

    async def mark_complete(self, reminder_id: str) -> Reminder:
        """
        Complete a reminder. Completing it again is a no-op.

        Raises:
            NotFoundError: no such reminder for this user
        """
        user = self.session.require_user()
        reminder = self._find(reminder_id)
        if reminder is None:
            await self.refresh()
            reminder = self._find(reminder_id)
            if reminder is None:
                raise NotFoundError(message="Reminder not found", resource_type="reminder",
                                    resource_id=reminder_id)
        if reminder.completed:
            return reminder

        await self.repository.mark_complete(reminder_id, user.user_id)
        self._freshness.issue()
        completed = reminder.model_copy(update={"completed": True})
        self._reminders = tuple(completed if r.id == reminder_id else r for r in self._reminders)
        await self.broadcast()
        logger.log_user_action("reminder_completed", user.user_id, resource=reminder_id)
        return completed

    def due_reminders(self, now: Optional[datetime] = None) -> List[Reminder]:
        now = now or self._clock()
        snapshot = self._reminders
        return [r for r in snapshot if r.is_due(now, self.settings.REMINDER_DUE_TOLERANCE)]

    async def check_due(self) -> int:
        """One poll tick. Returns how many notifications were delivered."""
        if self.notifications.permission is not NotificationPermission.GRANTED:
            return 0

        sent = 0
        for reminder in self.due_reminders():
            if await self.notifications.send(REMINDER_TITLE, reminder.reminder_text, tag=reminder.id):
                sent += 1
        if sent:
            logger.info(f"Delivered {sent} reminder notification(s)")
        return sent

    def start_polling(self):
        if self.is_polling:
            return
        self._poller = self.tasks.spawn(self._poll_loop(), name="reminders:poll")

    async def stop_polling(self):
        if self._poller is None:
            return
        self._poller.cancel()
        try:
            await self._poller
        except asyncio.CancelledError:
            pass
        self._poller = None

    async def _poll_loop(self):
        interval = self.settings.REMINDER_POLL_INTERVAL
        while True:
            await asyncio.sleep(interval)
            await self.check_due()

    def _find(self, reminder_id: str) -> Optional[Reminder]:
        for reminder in self._reminders:
            if reminder.id == reminder_id:
                return reminder
        return None
