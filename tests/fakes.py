"""
In-memory stand-ins for the Supabase repositories and remote clients.

Each fake keeps just enough state to answer like the real table or RPC and
records the calls tests assert on.
"""

import asyncio
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Set

from adoptd.container import UserScope
from adoptd.modules.achievements.domain.models.achievement import (
    Achievement,
    ActionType,
    Title,
    UserAchievement,
    UserTitle,
)
from adoptd.modules.achievements.domain.repositories.achievement_repository import AchievementRepository
from adoptd.modules.achievements.domain.services.achievement_service import AchievementState
from adoptd.modules.care_advice.domain.models.weather import (
    CitySuggestion,
    CurrentConditions,
    DaySummary,
    ForecastDay,
    Location,
    WeatherReport,
)
from adoptd.modules.care_advice.domain.repositories.weather_provider import WeatherProvider
from adoptd.modules.care_advice.domain.services.weather_service import WeatherAdviceService
from adoptd.modules.entitlement.domain.models.entitlement import UsageAction
from adoptd.modules.entitlement.domain.repositories.entitlement_repository import EntitlementRepository
from adoptd.modules.entitlement.domain.services.entitlement_service import EntitlementState
from adoptd.modules.forum.domain.models.forum import Comment, CommentLikeResult, Post
from adoptd.modules.forum.domain.repositories.forum_repository import ForumRepository
from adoptd.modules.forum.domain.services.forum_service import ForumState
from adoptd.modules.notifications.domain.services.notification_bridge import NotificationBridge
from adoptd.modules.plant_ai.domain.models.plant_ai import ChatMessage
from adoptd.modules.plant_ai.domain.repositories.generative_model import GenerativeModel
from adoptd.modules.plant_ai.domain.services.chat_service import ChatConsultant
from adoptd.modules.plant_ai.domain.services.scanner_service import PlantScanner
from adoptd.modules.reminders.domain.models.reminder import Reminder
from adoptd.modules.reminders.domain.repositories.reminder_repository import ReminderRepository
from adoptd.modules.reminders.domain.services.reminder_service import ReminderState
from adoptd.modules.session.domain.models.profile import UserProfile
from adoptd.modules.session.domain.models.session import Session
from adoptd.modules.session.domain.repositories.auth_repository import AuthRepository
from adoptd.modules.session.domain.repositories.profile_repository import ProfileRepository
from adoptd.modules.session.domain.services.profile_service import ProfileState
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings
from adoptd.shared.core.exceptions import AuthenticationError, GatewayError

USER_ID = "user-1"
T0 = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeAuthRepository(AuthRepository):
    def __init__(self, user_id: str = USER_ID, role: Optional[str] = None,
                 confirmation_required: bool = False):
        self.user_id = user_id
        self.roles: Dict[str, str] = {user_id: role} if role else {}
        self.confirmation_required = confirmation_required
        self.signed_out = 0

    async def sign_in(self, email: str, password: str) -> Session:
        if password == "wrong":
            raise AuthenticationError(message="Invalid login credentials")
        return Session(user_id=self.user_id, email=email, access_token=f"token-{self.user_id}")

    async def sign_up(self, email: str, password: str, redirect_to: Optional[str] = None) -> Optional[Session]:
        if self.confirmation_required:
            return None
        return Session(user_id=self.user_id, email=email, access_token=f"token-{self.user_id}")

    async def sign_out(self) -> None:
        self.signed_out += 1

    async def get_role(self, user_id: str) -> Optional[str]:
        return self.roles.get(user_id)


class FakeProfileRepository(ProfileRepository):
    def __init__(self):
        self.profiles: Dict[str, UserProfile] = {}

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        return self.profiles.get(user_id)

    async def upsert_profile(self, user_id: str, data: Dict[str, Any]) -> UserProfile:
        current = self.profiles.get(user_id) or UserProfile(user_id=user_id)
        profile = current.model_copy(update=data)
        self.profiles[user_id] = profile
        return profile

    async def upload_avatar(self, user_id: str, file_data: bytes, filename: str, content_type: str) -> str:
        return f"https://cdn.example.com/avatars/{user_id}/{filename}"


class FakeEntitlementRepository(EntitlementRepository):
    def __init__(self, tier_id: int = 0):
        self.tier_id = tier_id
        self.usage: Dict[date, Dict[str, int]] = {}
        self.fail_increment = False
        self.fail_fetch = False
        # next N increments fail after yielding to the loop once
        self.fail_next_increments = 0
        # when set, successful increments wait for it before writing
        self.gate: Optional[asyncio.Event] = None
        self.increments: List[UsageAction] = []

    async def get_tier_id(self, user_id: str) -> int:
        if self.fail_fetch:
            raise GatewayError("get_tier_id")
        return self.tier_id

    async def get_usage(self, user_id: str, day: date) -> Optional[Dict[str, Any]]:
        if self.fail_fetch:
            raise GatewayError("get_usage")
        return self.usage.get(day)

    async def increment_usage(self, user_id: str, day: date, action: UsageAction) -> None:
        if self.fail_increment:
            raise GatewayError("increment_usage")
        if self.fail_next_increments:
            self.fail_next_increments -= 1
            await asyncio.sleep(0)
            raise GatewayError("increment_usage")
        if self.gate is not None:
            await self.gate.wait()
        row = self.usage.setdefault(day, {"scans_count": 0, "chatbot_messages_count": 0})
        row[action.column] += 1
        self.increments.append(action)


class FakeAchievementRepository(AchievementRepository):
    def __init__(self):
        self.achievements = [
            Achievement(id="a-first-post", name="Первый пост", required_action="create_post", required_count=1),
            Achievement(id="a-scanner", name="Исследователь", required_action="scan_plant", required_count=10),
        ]
        self.titles = [
            Title(id="t-gardener", name="Садовод", required_achievement_id="a-first-post"),
            Title(id="t-botanist", name="Ботаник", required_achievement_id="a-scanner"),
            Title(id="t-admin", name="Толстый Алхимик"),
        ]
        self.user_titles: List[UserTitle] = []
        self.user_achievements: List[UserAchievement] = []
        self.actions: List[tuple] = []
        self.grant_calls = 0
        self.daily_logins = 0
        self.fail_clear_equipped = False
        self.fail_set_equipped = False

    def unlock_title(self, title_id: str, user_id: str = USER_ID):
        self.user_titles.append(UserTitle(id=f"ut-{title_id}", user_id=user_id, title_id=title_id))

    async def list_achievements(self) -> List[Achievement]:
        return list(self.achievements)

    async def list_titles(self) -> List[Title]:
        return list(self.titles)

    async def get_user_achievements(self, user_id: str) -> List[UserAchievement]:
        return [ua for ua in self.user_achievements if ua.user_id == user_id]

    async def get_user_titles(self, user_id: str) -> List[UserTitle]:
        return [ut for ut in self.user_titles if ut.user_id == user_id]

    async def record_action(self, user_id: str, action_type: ActionType, target_id: Optional[str] = None) -> None:
        self.actions.append((user_id, ActionType(action_type), target_id))

    async def grant_achievements(self, user_id: str) -> None:
        self.grant_calls += 1

    async def grant_titles(self, user_id: str) -> None:
        pass

    async def record_daily_login(self, user_id: str) -> None:
        self.daily_logins += 1

    async def clear_equipped(self, user_id: str) -> None:
        if self.fail_clear_equipped:
            raise GatewayError("clear_equipped")
        self.user_titles = [
            ut.model_copy(update={"equipped": False}) if ut.user_id == user_id else ut
            for ut in self.user_titles
        ]

    async def set_equipped(self, user_id: str, title_id: str) -> None:
        if self.fail_set_equipped:
            raise GatewayError("set_equipped")
        self.user_titles = [
            ut.model_copy(update={"equipped": True})
            if ut.user_id == user_id and ut.title_id == title_id else ut
            for ut in self.user_titles
        ]


def make_post(post_id: str, user_id: str = "author-1", likes: int = 0, pinned: bool = False) -> Post:
    return Post(
        id=post_id,
        title=f"Post {post_id}",
        content="Как спасти фикус?",
        user_id=user_id,
        created_at=T0,
        updated_at=T0,
        is_pinned=pinned,
        likes_count=likes,
    )


def make_comment(comment_id: str, post_id: str = "p1", parent_id: Optional[str] = None,
                 minutes: int = 0) -> Comment:
    return Comment(
        id=comment_id,
        content=f"Comment {comment_id}",
        user_id="author-2",
        post_id=post_id,
        parent_id=parent_id,
        created_at=T0 + timedelta(minutes=minutes),
    )


class FakeForumRepository(ForumRepository):
    """
    Like toggles behave like the ``toggle_like_and_get_result`` RPC: the
    membership flips and the RPC reports whether a row was inserted.
    """

    def __init__(self):
        self.posts: Dict[str, Post] = {"p1": make_post("p1", likes=3), "p2": make_post("p2", pinned=True)}
        self.likes: Set[tuple] = set()
        self.comments: List[Comment] = []
        self.comment_likes: Set[str] = set()
        self.fail_toggle = False
        self.list_gate: Optional[asyncio.Event] = None
        self.pins: List[tuple] = []
        self.uploads: List[str] = []

    async def list_posts(self) -> List[Post]:
        snapshot = [
            p.model_copy(update={"likes_count": p.likes_count + sum(1 for pid, _ in self.likes if pid == p.id)})
            for p in self.posts.values()
        ]
        if self.list_gate is not None:
            await self.list_gate.wait()
        return sorted(snapshot, key=lambda p: (not p.is_pinned, p.id))

    async def get_liked_post_ids(self, user_id: str) -> Set[str]:
        return {pid for pid, uid in self.likes if uid == user_id}

    async def toggle_post_like(self, post_id: str, user_id: str) -> bool:
        if self.fail_toggle:
            raise GatewayError("toggle_like_and_get_result")
        key = (post_id, user_id)
        if key in self.likes:
            self.likes.discard(key)
            return False
        self.likes.add(key)
        return True

    async def create_post(self, user_id: str, title: str, content: str,
                          photo_url: Optional[str] = None) -> Post:
        post_id = f"p{len(self.posts) + 1}"
        post = make_post(post_id, user_id=user_id).model_copy(
            update={"title": title, "content": content, "photo_url": photo_url}
        )
        self.posts[post_id] = post
        return post

    async def update_post(self, post_id: str, data: Dict[str, Any]) -> None:
        self.posts[post_id] = self.posts[post_id].model_copy(update=data)

    async def delete_post(self, post_id: str) -> None:
        self.posts.pop(post_id, None)

    async def set_pinned(self, post_id: str, is_pinned: bool) -> None:
        self.pins.append((post_id, is_pinned))
        self.posts[post_id] = self.posts[post_id].model_copy(update={"is_pinned": is_pinned})

    async def list_comments(self, post_id: str) -> List[Comment]:
        return [c for c in self.comments if c.post_id == post_id]

    async def create_comment(self, post_id: str, user_id: str, content: str,
                             parent_id: Optional[str] = None) -> Comment:
        comment = make_comment(f"c{len(self.comments) + 1}", post_id, parent_id, minutes=len(self.comments))
        comment = comment.model_copy(update={"content": content, "user_id": user_id})
        self.comments.append(comment)
        return comment

    async def update_comment(self, comment_id: str, data: Dict[str, Any]) -> None:
        self.comments = [c.model_copy(update=data) if c.id == comment_id else c for c in self.comments]

    async def delete_comment(self, comment_id: str) -> None:
        self.comments = [c for c in self.comments if c.id != comment_id]

    async def toggle_comment_like(self, comment_id: str) -> CommentLikeResult:
        if self.fail_toggle:
            raise GatewayError("toggle_comment_like")
        if comment_id in self.comment_likes:
            self.comment_likes.discard(comment_id)
            return CommentLikeResult(new_likes_count=0, liked_by_user=False)
        self.comment_likes.add(comment_id)
        return CommentLikeResult(new_likes_count=1, liked_by_user=True)

    async def upload_photo(self, user_id: str, file_data: bytes, filename: str,
                           content_type: str) -> str:
        self.uploads.append(filename)
        return f"https://cdn.example.com/forum/{user_id}/{filename}"


class FakeReminderRepository(ReminderRepository):
    def __init__(self):
        self.reminders: Dict[str, Reminder] = {}
        self.completions: List[str] = []

    def add(self, reminder_id: str, scheduled_for: datetime, user_id: str = USER_ID,
            completed: bool = False) -> Reminder:
        reminder = Reminder(
            id=reminder_id,
            user_id=user_id,
            reminder_text="Повторите обработку фунгицидом",
            scheduled_for=scheduled_for,
            completed=completed,
        )
        self.reminders[reminder_id] = reminder
        return reminder

    async def list_reminders(self, user_id: str) -> List[Reminder]:
        rows = [r for r in self.reminders.values() if r.user_id == user_id]
        return sorted(rows, key=lambda r: r.scheduled_for)

    async def create_reminder(self, user_id: str, reminder_text: str,
                              diagnosis_text: Optional[str], scheduled_for: datetime) -> Reminder:
        reminder = Reminder(
            id=f"r{len(self.reminders) + 1}",
            user_id=user_id,
            reminder_text=reminder_text,
            diagnosis_text=diagnosis_text,
            scheduled_for=scheduled_for,
        )
        self.reminders[reminder.id] = reminder
        return reminder

    async def mark_complete(self, reminder_id: str, user_id: str) -> None:
        self.completions.append(reminder_id)
        self.reminders[reminder_id] = self.reminders[reminder_id].model_copy(update={"completed": True})


class FakeGenerativeModel(GenerativeModel):
    def __init__(self, reply: str = "Название: Фикус\nСорт: Бенджамина\nПроисхождение: Азия"):
        self.reply = reply
        self.error: Optional[Exception] = None
        self.prompts: List[str] = []
        self.histories: List[List[ChatMessage]] = []

    async def generate(self, prompt: str, image: bytes, mime_type: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply

    async def chat(self, history: List[ChatMessage], message: str) -> str:
        self.prompts.append(message)
        self.histories.append(list(history))
        if self.error:
            raise self.error
        return self.reply


def make_report(temp_c: float = 20, feelslike_c: Optional[float] = None, humidity: float = 60,
                forecast_days: int = 0, **current: Any) -> WeatherReport:
    current.setdefault("uv", 4)
    current.setdefault("cloud", 50)
    conditions = CurrentConditions(
        temp_c=temp_c,
        feelslike_c=temp_c if feelslike_c is None else feelslike_c,
        humidity=humidity,
        **current,
    )
    forecast = [
        ForecastDay(
            date=(T0 + timedelta(days=i)).date().isoformat(),
            day=DaySummary(maxtemp_c=temp_c + 3, mintemp_c=temp_c - 3, avgtemp_c=temp_c, totalprecip_mm=3),
        )
        for i in range(forecast_days)
    ]
    return WeatherReport(location=Location(name="Москва", country="Россия"), current=conditions, forecast=forecast)


class FakeWeatherProvider(WeatherProvider):
    def __init__(self, report: Optional[WeatherReport] = None):
        self.report = report or make_report()
        self.calls: List[tuple] = []
        self.error: Optional[Exception] = None

    async def current(self, query: str) -> WeatherReport:
        self.calls.append(("current", query))
        if self.error:
            raise self.error
        return self.report.model_copy(update={"forecast": []})

    async def forecast(self, query: str, days: int) -> WeatherReport:
        self.calls.append(("forecast", query, days))
        if self.error:
            raise self.error
        return self.report

    async def search(self, text: str) -> List[CitySuggestion]:
        self.calls.append(("search", text))
        if self.error:
            raise self.error
        return [CitySuggestion(id=1, name="Москва", country="Россия", lat=55.75, lon=37.62)]


def build_fake_scope(settings: Settings, auth: FakeAuthRepository, profile: FakeProfileRepository,
                     entitlement: FakeEntitlementRepository, achievements: FakeAchievementRepository,
                     forum: FakeForumRepository, reminders: FakeReminderRepository,
                     model: FakeGenerativeModel, weather: Optional[FakeWeatherProvider],
                     today=lambda: T0.date(), clock=lambda: T0) -> UserScope:
    """Same wiring as ``build_user_scope`` with fakes and a fixed clock."""
    session = SessionState(auth, settings=settings)
    profile_state = ProfileState(session, profile, settings)
    entitlement_state = EntitlementState(session, entitlement, settings, today=today)
    achievement_state = AchievementState(session, achievements, settings)
    forum_state = ForumState(session, forum, achievement_state, settings)
    notifications = NotificationBridge(session.readiness, settings, clock=clock)
    reminder_state = ReminderState(session, reminders, notifications, settings, clock=clock)
    weather_service = WeatherAdviceService(weather, entitlement_state, settings)
    return UserScope(
        session=session,
        profile=profile_state,
        entitlement=entitlement_state,
        achievements=achievement_state,
        forum=forum_state,
        notifications=notifications,
        reminders=reminder_state,
        weather=weather_service,
        scanner=PlantScanner(session, entitlement_state, achievement_state, profile_state, model, settings),
        chat=ChatConsultant(session, entitlement_state, achievement_state, profile_state,
                            weather_service, model, settings),
    )
