"""Tests for reminders, the due-time poller and the notification bridge."""

from datetime import timedelta

import pytest

from adoptd.modules.notifications.domain.models.notification import NotificationPermission
from adoptd.shared.core.exceptions import NotFoundError, ValidationError
from tests.fakes import T0


class MovableClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock(scope):
    clock = MovableClock()
    scope.reminders._clock = clock
    scope.notifications._clock = clock
    return clock


@pytest.fixture
async def granted(scope):
    await scope.notifications.request_permission(NotificationPermission.GRANTED)
    return scope


# =============================================================================
# Due-time polling
# =============================================================================


class TestCheckDue:
    async def test_reminder_notifies_once_across_ticks(self, granted, reminder_repo, clock):
        reminder_repo.add("r1", T0 + timedelta(seconds=20))
        await granted.reminders.refresh()

        assert await granted.reminders.check_due() == 1
        clock.advance(30)
        assert await granted.reminders.check_due() == 0

        pending = granted.notifications.drain()
        assert [n.tag for n in pending] == ["r1"]
        assert pending[0].body == "Повторите обработку фунгицидом"

    async def test_tolerance_is_inclusive(self, granted, reminder_repo):
        reminder_repo.add("edge", T0 - timedelta(seconds=60))
        reminder_repo.add("late", T0 - timedelta(seconds=61))
        await granted.reminders.refresh()

        assert [r.id for r in granted.reminders.due_reminders(T0)] == ["edge"]

    async def test_completed_reminders_are_not_due(self, granted, reminder_repo):
        reminder_repo.add("done", T0, completed=True)
        await granted.reminders.refresh()

        assert await granted.reminders.check_due() == 0

    async def test_nothing_is_sent_without_permission(self, scope, reminder_repo):
        reminder_repo.add("r1", T0)
        await scope.reminders.refresh()

        assert await scope.reminders.check_due() == 0
        assert scope.notifications.drain() == []

    async def test_denied_permission_stops_delivery(self, granted, reminder_repo):
        reminder_repo.add("r1", T0)
        await granted.reminders.refresh()
        await granted.notifications.request_permission("denied")

        assert await granted.reminders.check_due() == 0

    async def test_polling_starts_and_stops(self, scope):
        scope.reminders.start_polling()
        scope.reminders.start_polling()
        assert scope.reminders.is_polling

        await scope.reminders.stop_polling()

        assert not scope.reminders.is_polling


# =============================================================================
# Create / complete
# =============================================================================


class TestReminderLifecycle:
    async def test_create_schedules_from_now(self, scope, reminder_repo):
        reminder = await scope.reminders.create_reminder("Полить снова", "Хлороз", delay_days=6)

        assert reminder.scheduled_for == T0 + timedelta(days=6)
        assert [r.id for r in scope.reminders.snapshot] == [reminder.id]

    async def test_negative_delay_is_rejected(self, scope):
        with pytest.raises(ValidationError):
            await scope.reminders.create_reminder("Полить", None, delay_days=-1)

    async def test_blank_text_is_rejected(self, scope):
        with pytest.raises(ValidationError):
            await scope.reminders.create_reminder("   ", None, delay_days=1)

    async def test_mark_complete_is_idempotent(self, scope, reminder_repo):
        reminder_repo.add("r1", T0 + timedelta(days=2))
        await scope.reminders.refresh()

        first = await scope.reminders.mark_complete("r1")
        second = await scope.reminders.mark_complete("r1")

        assert first.completed and second.completed
        assert reminder_repo.completions == ["r1"]

    async def test_complete_fetches_unknown_ids_once(self, scope, reminder_repo):
        reminder_repo.add("r7", T0)

        completed = await scope.reminders.mark_complete("r7")

        assert completed.id == "r7"

    async def test_complete_missing_reminder_is_not_found(self, scope):
        with pytest.raises(NotFoundError):
            await scope.reminders.mark_complete("missing")


# =============================================================================
# Notification bridge
# =============================================================================


class TestNotificationBridge:
    async def test_send_requires_permission(self, scope):
        assert scope.notifications.permission is NotificationPermission.DEFAULT
        assert await scope.notifications.send("Hello") is False

    async def test_live_tag_is_deduplicated(self, granted):
        assert await granted.notifications.send("A", tag="t1") is True
        assert await granted.notifications.send("A again", tag="t1") is False
        assert await granted.notifications.send("untagged") is True
        assert await granted.notifications.send("untagged") is True

        assert len(granted.notifications.snapshot.pending) == 3

    async def test_tag_expires_after_ttl(self, granted, clock, settings):
        await granted.notifications.send("A", tag="t1")

        clock.advance(settings.NOTIFICATION_TAG_TTL + 1)

        assert await granted.notifications.send("A", tag="t1") is True

    async def test_drain_empties_outbox(self, granted):
        await granted.notifications.send("A")

        assert len(granted.notifications.drain()) == 1
        assert granted.notifications.drain() == []
