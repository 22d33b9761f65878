"""Tests for achievement recording, title equip and the requirement catalog."""

import asyncio

import pytest

from adoptd.modules.achievements.domain.models.achievement import ActionType
from adoptd.modules.achievements.domain.services.requirements import describe_action, plural
from adoptd.shared.core.exceptions import GatewayError, NotFoundError
from tests.fakes import USER_ID


class TestTitles:
    async def test_equip_a_then_b_leaves_only_b(self, scope, achievement_repo):
        achievement_repo.unlock_title("t-gardener")
        achievement_repo.unlock_title("t-botanist")
        await scope.achievements.refresh()

        await scope.achievements.equip_title("t-gardener")
        equipped = await scope.achievements.equip_title("t-botanist")

        assert equipped.title_id == "t-botanist"
        flags = {ut.title_id: ut.equipped for ut in achievement_repo.user_titles}
        assert flags == {"t-gardener": False, "t-botanist": True}

    async def test_concurrent_equips_leave_one_title(self, scope, achievement_repo):
        achievement_repo.unlock_title("t-gardener")
        achievement_repo.unlock_title("t-botanist")
        await scope.achievements.refresh()

        await asyncio.gather(
            scope.achievements.equip_title("t-gardener"),
            scope.achievements.equip_title("t-botanist"),
        )

        equipped = [ut for ut in achievement_repo.user_titles if ut.equipped]
        assert len(equipped) == 1
        assert scope.achievements.equipped_title.title_id == equipped[0].title_id

    async def test_equip_locked_title_is_not_found(self, scope):
        with pytest.raises(NotFoundError):
            await scope.achievements.equip_title("t-admin")

    async def test_unequip_clears_title(self, scope, achievement_repo):
        achievement_repo.unlock_title("t-gardener")
        await scope.achievements.equip_title("t-gardener")

        await scope.achievements.unequip_title()

        assert scope.achievements.equipped_title is None
        assert not any(ut.equipped for ut in achievement_repo.user_titles)

    async def test_failed_set_after_clear_reloads_titles(self, scope, achievement_repo):
        achievement_repo.unlock_title("t-gardener")
        achievement_repo.unlock_title("t-botanist")
        await scope.achievements.refresh()
        await scope.achievements.equip_title("t-gardener")
        achievement_repo.fail_set_equipped = True

        with pytest.raises(GatewayError):
            await scope.achievements.equip_title("t-botanist")

        assert not any(ut.equipped for ut in achievement_repo.user_titles)
        assert scope.achievements.equipped_title is None

    async def test_failed_unequip_keeps_server_title(self, scope, achievement_repo):
        achievement_repo.unlock_title("t-gardener")
        await scope.achievements.equip_title("t-gardener")
        achievement_repo.fail_clear_equipped = True

        with pytest.raises(GatewayError):
            await scope.achievements.unequip_title()

        assert scope.achievements.equipped_title.title_id == "t-gardener"


class TestRecording:
    async def test_record_and_reconcile_grants(self, scope, achievement_repo):
        await scope.achievements.record_and_reconcile(ActionType.PLANT_SCANNED)

        assert achievement_repo.actions == [(USER_ID, ActionType.PLANT_SCANNED, None)]
        assert achievement_repo.grant_calls == 1

    async def test_recording_failure_is_swallowed(self, scope, achievement_repo, monkeypatch):
        async def broken(*args, **kwargs):
            raise GatewayError("record_action")

        monkeypatch.setattr(achievement_repo, "record_action", broken)

        await scope.achievements.record_and_reconcile(ActionType.POST_CREATED, "p9")

        assert achievement_repo.grant_calls == 0

    async def test_start_records_daily_login(self, scope, achievement_repo):
        await scope.achievements.start()

        assert achievement_repo.daily_logins == 1


class TestCatalog:
    async def test_admin_titles_have_no_requirement(self, scope, achievement_repo):
        achievement_repo.unlock_title("t-gardener")
        await scope.achievements.refresh()

        catalog = await scope.achievements.catalog_requirements()

        titles = {row.title.id: row for row in catalog.titles}
        assert titles["t-admin"].special is True
        assert titles["t-admin"].requirement is None
        assert titles["t-gardener"].unlocked is True
        assert "Первый пост" in titles["t-gardener"].requirement

        scanner = next(row for row in catalog.achievements if row.achievement.id == "a-scanner")
        assert scanner.requirement == "Проведите 10 сканирований растений"
        assert describe_action("unknown_kind", 2) == 'Выполните действие "unknown_kind" 2 раз'

    def test_plural_forms(self):
        forms = ("пост", "поста", "постов")
        assert plural(1, forms) == "пост"
        assert plural(3, forms) == "поста"
        assert plural(11, forms) == "постов"
        assert plural(5, forms) == "постов"
