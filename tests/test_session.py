"""Tests for session state, profile state and the scope registry."""

import pytest

from adoptd.container import ScopeRegistry
from adoptd.modules.session.domain.models.profile import ProfileUpdate
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.core.exceptions import AuthenticationError, AuthorizationError, InvalidFileTypeError
from tests.fakes import (
    USER_ID,
    FakeAchievementRepository,
    FakeAuthRepository,
    FakeEntitlementRepository,
    FakeForumRepository,
    FakeGenerativeModel,
    FakeProfileRepository,
    FakeReminderRepository,
    FakeWeatherProvider,
    build_fake_scope,
)


class TestSessionState:
    async def test_sign_in_resolves_readiness(self, settings):
        session = SessionState(FakeAuthRepository(), settings=settings)

        await session.sign_in("gardener@example.com", "secret123")

        assert session.readiness.resolved
        assert await session.readiness.wait() is True
        assert session.require_user().user_id == USER_ID

    async def test_rejected_sign_in_still_resolves_readiness(self, settings):
        session = SessionState(FakeAuthRepository(), settings=settings)

        with pytest.raises(AuthenticationError):
            await session.sign_in("gardener@example.com", "wrong")

        assert await session.readiness.wait() is False

    async def test_missing_session_redirects_to_login(self, settings):
        session = SessionState(FakeAuthRepository(), settings=settings)

        with pytest.raises(AuthenticationError) as exc_info:
            session.require_user()

        assert exc_info.value.details["redirect_to"] == settings.AUTH_REDIRECT_PATH

    async def test_role_comes_from_users_table(self, settings):
        session = SessionState(FakeAuthRepository(role="admin"), settings=settings)

        await session.sign_in("admin@example.com", "secret123")

        assert session.is_admin
        assert session.require_admin().user_id == USER_ID

    async def test_unknown_role_is_plain_user(self, settings):
        session = SessionState(FakeAuthRepository(role="superuser"), settings=settings)

        await session.sign_in("gardener@example.com", "secret123")

        assert session.role == "user"
        with pytest.raises(AuthorizationError):
            session.require_admin()

    async def test_sign_out_clears_session(self, scope, auth_repo):
        await scope.session.sign_out()

        assert scope.session.snapshot is None
        assert auth_repo.signed_out == 1
        with pytest.raises(AuthenticationError):
            await scope.forum.refresh()

    async def test_sign_up_pending_confirmation(self, settings):
        session = SessionState(FakeAuthRepository(confirmation_required=True), settings=settings)

        assert await session.sign_up("new@example.com", "secret123") is None
        assert session.snapshot is None


class TestProfileState:
    async def test_missing_row_gives_empty_profile(self, scope):
        profile = await scope.profile.refresh()

        assert profile.user_id == USER_ID
        assert profile.display_name == "Пользователь"

    async def test_update_strips_values(self, scope):
        profile = await scope.profile.update(ProfileUpdate(occupation="  агроном "))

        assert profile.occupation == "агроном"
        assert scope.profile.occupation == "агроном"

    async def test_avatar_must_be_an_image(self, scope):
        with pytest.raises(InvalidFileTypeError):
            await scope.profile.upload_avatar(b"<svg/>", "me.svg", "image/svg+xml")


# =============================================================================
# Registry
# =============================================================================


@pytest.fixture
def auth_for_registry():
    return FakeAuthRepository(confirmation_required=False)


@pytest.fixture
async def registry(settings, auth_for_registry):
    async def factory():
        return build_fake_scope(
            settings,
            auth=auth_for_registry,
            profile=FakeProfileRepository(),
            entitlement=FakeEntitlementRepository(),
            achievements=FakeAchievementRepository(),
            forum=FakeForumRepository(),
            reminders=FakeReminderRepository(),
            model=FakeGenerativeModel(),
            weather=FakeWeatherProvider(),
        )

    registry = ScopeRegistry(factory, settings)
    yield registry
    await registry.close_all()


class TestScopeRegistry:
    async def test_sign_in_registers_started_scope(self, registry):
        scope = await registry.sign_in("gardener@example.com", "secret123")

        assert await registry.get(f"token-{USER_ID}") is scope
        assert len(registry) == 1
        assert scope.reminders.is_polling
        assert [p.id for p in scope.forum.snapshot.posts] == ["p2", "p1"]

    async def test_unknown_token_is_unauthenticated(self, registry):
        with pytest.raises(AuthenticationError):
            await registry.get("nope")
        with pytest.raises(AuthenticationError):
            await registry.get(None)

    async def test_second_sign_in_replaces_scope(self, registry):
        first = await registry.sign_in("gardener@example.com", "secret123")
        second = await registry.sign_in("gardener@example.com", "secret123")

        assert await registry.get(f"token-{USER_ID}") is second
        assert not first.reminders.is_polling
        assert len(registry) == 1

    async def test_expired_session_drops_scope_and_stops_poller(self, registry):
        scope = await registry.sign_in("gardener@example.com", "secret123")
        scope.session._session = scope.session.snapshot.model_copy(update={"expires_at": 1})

        with pytest.raises(AuthenticationError):
            await registry.get(f"token-{USER_ID}")

        assert len(registry) == 0
        assert not scope.reminders.is_polling

    async def test_sign_out_removes_scope(self, registry, auth_for_registry):
        await registry.sign_in("gardener@example.com", "secret123")

        await registry.sign_out(f"token-{USER_ID}")
        await registry.sign_out(f"token-{USER_ID}")

        assert len(registry) == 0
        assert auth_for_registry.signed_out == 1

    async def test_sign_up_pending_registers_nothing(self, registry, auth_for_registry):
        auth_for_registry.confirmation_required = True

        assert await registry.sign_up("new@example.com", "secret123") is None
        assert len(registry) == 0
