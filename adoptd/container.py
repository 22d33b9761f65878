# 📄 File: adoptd/container.py
# 🧭 Purpose (Layman Explanation):
# Builds everything one signed-in user needs (their session, limits, badges, forum view,
# reminders, weather tips, scanner and chat) and keeps track of who is signed in.
# 🧪 Purpose (Technical Summary):
# Composition root. UserScope wires the state services of one session around a shared
# Readiness gate and BackgroundTasks set; build_user_scope binds them to Supabase
# repository implementations. ScopeRegistry maps access tokens to live scopes and owns
# their start/stop lifecycle (including the reminder poller).
# 🔗 Dependencies:
# All module services and repository implementations, SupabaseManager, Settings
# 🔄 Connected Modules / Calls From:
# adoptd.main lifespan, adoptd.shared.core.dependencies, auth endpoints, tests

import asyncio
from typing import Awaitable, Callable, Dict, Optional

from supabase import AsyncClient

from adoptd.modules.achievements.domain.services.achievement_service import AchievementState
from adoptd.modules.achievements.infrastructure.database.achievement_repository_impl import AchievementRepositoryImpl
from adoptd.modules.care_advice.domain.repositories.weather_provider import WeatherProvider
from adoptd.modules.care_advice.domain.services.weather_service import WeatherAdviceService
from adoptd.modules.entitlement.domain.services.entitlement_service import EntitlementState
from adoptd.modules.entitlement.infrastructure.database.entitlement_repository_impl import EntitlementRepositoryImpl
from adoptd.modules.forum.domain.services.forum_service import ForumState
from adoptd.modules.forum.infrastructure.database.forum_repository_impl import ForumRepositoryImpl
from adoptd.modules.notifications.domain.services.notification_bridge import NotificationBridge
from adoptd.modules.plant_ai.domain.repositories.generative_model import GenerativeModel
from adoptd.modules.plant_ai.domain.services.chat_service import ChatConsultant
from adoptd.modules.plant_ai.domain.services.scanner_service import PlantScanner
from adoptd.modules.reminders.domain.services.reminder_service import ReminderState
from adoptd.modules.reminders.infrastructure.database.reminder_repository_impl import ReminderRepositoryImpl
from adoptd.modules.session.domain.models.session import Session
from adoptd.modules.session.domain.services.profile_service import ProfileState
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.modules.session.infrastructure.database.auth_repository_impl import AuthRepositoryImpl
from adoptd.modules.session.infrastructure.database.profile_repository_impl import ProfileRepositoryImpl
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.config.supabase import get_supabase_manager
from adoptd.shared.core.exceptions import AuthenticationError
from adoptd.shared.infrastructure.storage.supabase_storage import SupabaseStorageClient
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)

SHUTDOWN_GRACE_SECONDS = 5.0


class UserScope:
    """
    State services of one signed-in session.

    Services share the session's readiness gate, so everything started
    before sign-in resolves waits instead of fetching anonymously.
    """

    def __init__(
        self,
        session: SessionState,
        profile: ProfileState,
        entitlement: EntitlementState,
        achievements: AchievementState,
        forum: ForumState,
        notifications: NotificationBridge,
        reminders: ReminderState,
        weather: WeatherAdviceService,
        scanner: PlantScanner,
        chat: ChatConsultant,
    ):
        self.session = session
        self.profile = profile
        self.entitlement = entitlement
        self.achievements = achievements
        self.forum = forum
        self.notifications = notifications
        self.reminders = reminders
        self.weather = weather
        self.scanner = scanner
        self.chat = chat

    @property
    def tasks(self):
        return self.session.tasks

    async def start(self):
        """Initial loads; one failing service does not block the others."""
        services = (self.profile, self.entitlement, self.achievements, self.forum, self.reminders)
        results = await asyncio.gather(*(s.start() for s in services), return_exceptions=True)
        for service, result in zip(services, results):
            if isinstance(result, Exception):
                logger.error(f"Initial load of {service.name} failed: {result}", user_id=self.session.user_id)

    async def close(self):
        await self.reminders.stop_polling()
        try:
            await asyncio.wait_for(self.tasks.drain(), timeout=SHUTDOWN_GRACE_SECONDS)
        except asyncio.TimeoutError:
            logger.warning(f"Cancelling {self.tasks.pending} background task(s) on scope close")
            await self.tasks.cancel_all()


def build_user_scope(client: AsyncClient, model: GenerativeModel,
                     weather_provider: Optional[WeatherProvider] = None,
                     settings: Optional[Settings] = None) -> UserScope:
    """Wire a scope to the Supabase-backed repositories."""
    settings = settings or get_settings()
    storage = SupabaseStorageClient(client, settings)

    session = SessionState(AuthRepositoryImpl(client), settings=settings)
    profile = ProfileState(session, ProfileRepositoryImpl(client, storage, settings.AVATARS_BUCKET), settings)
    entitlement = EntitlementState(session, EntitlementRepositoryImpl(client), settings)
    achievements = AchievementState(session, AchievementRepositoryImpl(client), settings)
    forum = ForumState(
        session,
        ForumRepositoryImpl(client, storage, settings.FORUM_PHOTOS_BUCKET),
        achievements,
        settings,
    )
    notifications = NotificationBridge(session.readiness, settings)
    reminders = ReminderState(session, ReminderRepositoryImpl(client), notifications, settings)
    weather = WeatherAdviceService(weather_provider, entitlement, settings)
    scanner = PlantScanner(session, entitlement, achievements, profile, model, settings)
    chat = ChatConsultant(session, entitlement, achievements, profile, weather, model, settings)

    return UserScope(
        session=session,
        profile=profile,
        entitlement=entitlement,
        achievements=achievements,
        forum=forum,
        notifications=notifications,
        reminders=reminders,
        weather=weather,
        scanner=scanner,
        chat=chat,
    )


ScopeFactory = Callable[[], Awaitable[UserScope]]


class ScopeRegistry:
    """
    Live user scopes keyed by access token.
    """

    def __init__(self, scope_factory: ScopeFactory, settings: Optional[Settings] = None):
        self.scope_factory = scope_factory
        self.settings = settings or get_settings()
        self._scopes: Dict[str, UserScope] = {}

    def __len__(self) -> int:
        return len(self._scopes)

    async def sign_in(self, email: str, password: str) -> UserScope:
        scope = await self.scope_factory()
        session = await scope.session.sign_in(email, password)
        return await self._register(scope, session)

    async def sign_up(self, email: str, password: str) -> Optional[UserScope]:
        """None while the account awaits email confirmation."""
        scope = await self.scope_factory()
        session = await scope.session.sign_up(email, password)
        if session is None:
            return None
        return await self._register(scope, session)

    async def get(self, access_token: Optional[str]) -> UserScope:
        """
        Scope for a bearer token. An expired session is dropped and its scope closed.

        Raises:
            AuthenticationError: unknown token or expired session
        """
        scope = self._scopes.get(access_token) if access_token else None
        if scope is None:
            raise AuthenticationError(
                message="Session missing or expired",
                redirect_to=self.settings.AUTH_REDIRECT_PATH,
            )
        try:
            scope.session.require_user()
        except AuthenticationError:
            if self._scopes.get(access_token) is scope:
                del self._scopes[access_token]
                logger.info("Dropping expired user scope", user_id=scope.session.user_id)
                await scope.close()
            raise
        return scope

    async def sign_out(self, access_token: Optional[str]):
        """Sign-out without a live session is a success."""
        scope = self._scopes.pop(access_token, None) if access_token else None
        if scope is None:
            return
        await scope.session.sign_out()
        await scope.close()

    async def close_all(self):
        scopes = list(self._scopes.values())
        self._scopes.clear()
        for scope in scopes:
            await scope.close()
        logger.info(f"Closed {len(scopes)} user scope(s)")

    async def _register(self, scope: UserScope, session: Session) -> UserScope:
        if not session.access_token:
            raise AuthenticationError(
                message="Sign-in returned no access token",
                redirect_to=self.settings.AUTH_REDIRECT_PATH,
            )
        previous = self._scopes.pop(session.access_token, None)
        if previous is not None:
            await previous.close()
        self._scopes[session.access_token] = scope
        await scope.start()
        return scope


def supabase_scope_factory(model: GenerativeModel, weather_provider: Optional[WeatherProvider] = None,
                           settings: Optional[Settings] = None) -> ScopeFactory:
    settings = settings or get_settings()

    async def factory() -> UserScope:
        client = await get_supabase_manager().create_client()
        return build_user_scope(client, model, weather_provider, settings)

    return factory
