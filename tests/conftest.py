"""Shared fixtures: test settings and a signed-in user scope backed by in-memory fakes."""

import os

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest

from adoptd.shared.config.settings import Settings, get_settings
from tests.fakes import (
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


@pytest.fixture
def settings() -> Settings:
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def auth_repo() -> FakeAuthRepository:
    return FakeAuthRepository()


@pytest.fixture
def entitlement_repo() -> FakeEntitlementRepository:
    return FakeEntitlementRepository()


@pytest.fixture
def achievement_repo() -> FakeAchievementRepository:
    return FakeAchievementRepository()


@pytest.fixture
def forum_repo() -> FakeForumRepository:
    return FakeForumRepository()


@pytest.fixture
def reminder_repo() -> FakeReminderRepository:
    return FakeReminderRepository()


@pytest.fixture
def model() -> FakeGenerativeModel:
    return FakeGenerativeModel()


@pytest.fixture
def weather_provider() -> FakeWeatherProvider:
    return FakeWeatherProvider()


@pytest.fixture
async def scope(settings, auth_repo, entitlement_repo, achievement_repo, forum_repo,
                reminder_repo, model, weather_provider):
    """Signed-in scope for user-1; the reminder poller is stopped on teardown."""
    scope = build_fake_scope(
        settings,
        auth=auth_repo,
        profile=FakeProfileRepository(),
        entitlement=entitlement_repo,
        achievements=achievement_repo,
        forum=forum_repo,
        reminders=reminder_repo,
        model=model,
        weather=weather_provider,
    )
    await scope.session.sign_in("gardener@example.com", "secret123")
    yield scope
    await scope.close()
