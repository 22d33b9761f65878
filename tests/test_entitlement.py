"""Tests for daily usage metering and tier resolution."""

import asyncio
from datetime import timedelta

from adoptd.modules.entitlement.domain.models.entitlement import Tier, UsageAction
from tests.fakes import T0


# =============================================================================
# Free tier
# =============================================================================


class TestFreeTierQuota:
    async def test_eighth_scan_is_refused_without_increment(self, scope, entitlement_repo):
        """Seven scans pass, the eighth is refused and nothing more is written."""
        results = [await scope.entitlement.check_and_increment(UsageAction.SCAN) for _ in range(8)]

        assert results == [True] * 7 + [False]
        assert scope.entitlement.snapshot.scans_count == 7
        assert entitlement_repo.increments.count(UsageAction.SCAN) == 7

    async def test_chat_quota_is_independent_of_scans(self, scope):
        for _ in range(7):
            await scope.entitlement.check_and_increment(UsageAction.SCAN)

        assert scope.entitlement.can_perform(UsageAction.SCAN) is False
        assert scope.entitlement.can_perform(UsageAction.CHAT) is True
        assert await scope.entitlement.check_and_increment("chat") is True

    async def test_quota_reports_free_limits(self, scope, settings):
        assert scope.entitlement.quota(UsageAction.SCAN) == settings.FREE_DAILY_SCANS
        assert scope.entitlement.quota(UsageAction.CHAT) == settings.FREE_DAILY_CHAT_MESSAGES

    async def test_refresh_reads_server_counters(self, scope, entitlement_repo):
        entitlement_repo.usage[T0.date()] = {"scans_count": 5, "chatbot_messages_count": 2}

        snapshot = await scope.entitlement.refresh()

        assert snapshot.tier == Tier.FREE
        assert snapshot.scans_count == 5
        assert snapshot.chat_messages_count == 2

    async def test_counters_reset_on_a_new_day(self, scope):
        for _ in range(7):
            await scope.entitlement.check_and_increment(UsageAction.SCAN)

        scope.entitlement._today = lambda: T0.date() + timedelta(days=1)

        assert scope.entitlement.snapshot.scans_count == 0
        assert await scope.entitlement.check_and_increment(UsageAction.SCAN) is True


# =============================================================================
# Premium tier
# =============================================================================


class TestPremiumTier:
    async def test_premium_is_never_blocked(self, scope, entitlement_repo, settings):
        entitlement_repo.tier_id = settings.PREMIUM_TIER_ID
        await scope.entitlement.refresh()

        results = [await scope.entitlement.check_and_increment(UsageAction.SCAN) for _ in range(20)]
        await scope.tasks.drain()

        assert all(results)
        assert scope.entitlement.is_premium
        assert scope.entitlement.quota(UsageAction.SCAN) is None
        assert entitlement_repo.increments.count(UsageAction.SCAN) == 20

    async def test_premium_increment_failure_does_not_block(self, scope, entitlement_repo, settings):
        entitlement_repo.tier_id = settings.PREMIUM_TIER_ID
        await scope.entitlement.refresh()
        entitlement_repo.fail_increment = True

        assert await scope.entitlement.check_and_increment(UsageAction.CHAT) is True
        await scope.tasks.drain()

        assert scope.tasks.get_stats()["failed"] == 1


# =============================================================================
# Failure reconciliation
# =============================================================================


class TestIncrementFailure:
    async def test_failed_increment_refuses_and_reloads(self, scope, entitlement_repo):
        entitlement_repo.usage[T0.date()] = {"scans_count": 2, "chatbot_messages_count": 0}
        await scope.entitlement.refresh()
        entitlement_repo.fail_increment = True

        allowed = await scope.entitlement.check_and_increment(UsageAction.SCAN)

        assert allowed is False
        assert scope.entitlement.snapshot.scans_count == 2

    async def test_failed_reload_gives_back_only_this_bump(self, scope, entitlement_repo):
        await scope.entitlement.check_and_increment(UsageAction.SCAN)
        entitlement_repo.fail_increment = True
        entitlement_repo.fail_fetch = True

        allowed = await scope.entitlement.check_and_increment(UsageAction.SCAN)

        assert allowed is False
        assert scope.entitlement.snapshot.scans_count == 1


# =============================================================================
# Concurrent calls
# =============================================================================


class TestConcurrentCalls:
    async def test_burst_counts_locally_before_remote_write(self, scope, entitlement_repo):
        entitlement_repo.gate = asyncio.Event()

        pending = [asyncio.create_task(scope.entitlement.check_and_increment(UsageAction.SCAN)) for _ in range(10)]
        await asyncio.sleep(0)

        assert scope.entitlement.snapshot.scans_count == 7
        assert entitlement_repo.increments == []

        entitlement_repo.gate.set()
        results = await asyncio.gather(*pending)

        assert results.count(True) == 7
        assert entitlement_repo.increments.count(UsageAction.SCAN) == 7

    async def test_one_failure_in_a_burst_keeps_pending_bumps(self, scope, entitlement_repo):
        entitlement_repo.gate = asyncio.Event()
        entitlement_repo.fail_next_increments = 1

        first_burst = [asyncio.create_task(scope.entitlement.check_and_increment(UsageAction.SCAN)) for _ in range(7)]
        assert await first_burst[0] is False
        # six writes still pending; the failed call's bump is given back
        assert scope.entitlement.snapshot.scans_count == 6

        second_burst = [asyncio.create_task(scope.entitlement.check_and_increment(UsageAction.SCAN)) for _ in range(7)]
        await asyncio.sleep(0)
        entitlement_repo.gate.set()
        results = await asyncio.gather(*first_burst[1:], *second_burst)

        assert results.count(True) == 7
        assert entitlement_repo.increments.count(UsageAction.SCAN) == 7
        assert scope.entitlement.snapshot.scans_count == 7

    async def test_refresh_during_pending_write_keeps_local_count(self, scope, entitlement_repo):
        entitlement_repo.gate = asyncio.Event()
        pending = asyncio.create_task(scope.entitlement.check_and_increment(UsageAction.CHAT))
        await asyncio.sleep(0)

        snapshot = await scope.entitlement.refresh()

        assert snapshot.chat_messages_count == 1
        entitlement_repo.gate.set()
        assert await pending is True


class TestPlans:
    async def test_plans_describe_free_and_premium(self, scope, settings):
        free, premium = scope.entitlement.plans()

        assert free.tier == Tier.FREE
        assert free.daily_scans == settings.FREE_DAILY_SCANS
        assert premium.daily_scans is None
        assert premium.weather_forecast_days == settings.WEATHER_FORECAST_DAYS
