"""HTTP-level tests against the FastAPI app with an in-memory scope registry."""

import pytest
from fastapi.testclient import TestClient

from adoptd.container import ScopeRegistry
from adoptd.main import app
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

TOKEN = f"token-{USER_ID}"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def client(settings):
    async def factory():
        return build_fake_scope(
            settings,
            auth=FakeAuthRepository(),
            profile=FakeProfileRepository(),
            entitlement=FakeEntitlementRepository(),
            achievements=FakeAchievementRepository(),
            forum=FakeForumRepository(),
            reminders=FakeReminderRepository(),
            model=FakeGenerativeModel(),
            weather=FakeWeatherProvider(),
        )

    app.state.registry = ScopeRegistry(factory, settings)
    with TestClient(app) as test_client:
        yield test_client
    app.state.registry = None


@pytest.fixture
def signed_in(client):
    response = client.post(
        "/api/v1/auth/sign-in",
        json={"email": "Gardener@Example.com ", "password": "secret123"},
    )
    assert response.status_code == 200
    return client


class TestAuth:
    def test_sign_in_returns_session(self, client):
        response = client.post(
            "/api/v1/auth/sign-in",
            json={"email": "gardener@example.com", "password": "secret123"},
        )

        body = response.json()
        assert body["access_token"] == TOKEN
        assert body["email"] == "gardener@example.com"
        assert body["is_admin"] is False

    def test_wrong_password_is_401(self, client):
        response = client.post(
            "/api/v1/auth/sign-in",
            json={"email": "gardener@example.com", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"

    def test_missing_token_redirects_to_login(self, client, settings):
        response = client.get("/api/v1/usage")

        assert response.status_code == 401
        assert response.json()["error"]["redirect_to"] == settings.AUTH_REDIRECT_PATH

    def test_sign_out_invalidates_token(self, signed_in):
        assert signed_in.post("/api/v1/auth/sign-out", headers=AUTH).status_code == 200

        assert signed_in.get("/api/v1/auth/session", headers=AUTH).status_code == 401


class TestEndpoints:
    def test_usage_reports_free_limits(self, signed_in, settings):
        body = signed_in.get("/api/v1/usage", headers=AUTH).json()

        assert body["is_premium"] is False
        assert body["scans"] == {"used": 0, "limit": settings.FREE_DAILY_SCANS, "remaining": settings.FREE_DAILY_SCANS}

    def test_feed_and_like(self, signed_in):
        feed = signed_in.get("/api/v1/forum/posts", headers=AUTH).json()
        assert [p["id"] for p in feed["posts"]] == ["p2", "p1"]

        liked = signed_in.post("/api/v1/forum/posts/p1/like", headers=AUTH).json()

        assert liked["post"]["likes_count"] == 4
        assert liked["post"]["is_liked"] is True
        assert liked["like_state"] == "synced"

    def test_scan_rejects_non_images(self, signed_in):
        response = signed_in.post(
            "/api/v1/ai/scan",
            headers=AUTH,
            files={"file": ("notes.txt", b"hello", "text/plain")},
            data={"scan_type": "identify"},
        )

        assert response.status_code == 400

    def test_scan_identifies_plant(self, signed_in):
        response = signed_in.post(
            "/api/v1/ai/scan",
            headers=AUTH,
            files={"file": ("ficus.jpg", b"\xff\xd8\xff\xe0data", "image/jpeg")},
            data={"scan_type": "identify"},
        )

        assert response.status_code == 200
        assert response.json()["identification"]["name"] == "Фикус"

    def test_time_phrases(self, signed_in):
        response = signed_in.post(
            "/api/v1/care/time-phrases",
            headers=AUTH,
            json={"text": "Полейте через 5-7 дней."},
        )

        assert response.json()[0]["days"] == 6


class TestHealth:
    def test_health(self, client):
        body = client.get("/api/v1/health").json()

        assert body["status"] == "healthy"
