"""
Chat consultant: a metered, weather-aware plant care conversation.

History lives in the user's scope only; nothing is persisted remotely.
"""

from typing import List, Optional, Tuple

from adoptd.modules.achievements.domain.models.achievement import ActionType
from adoptd.modules.achievements.domain.services.achievement_service import AchievementState
from adoptd.modules.care_advice.domain.models.weather import WeatherReport
from adoptd.modules.care_advice.domain.services.weather_service import WeatherAdviceService, location_query
from adoptd.modules.entitlement.domain.models.entitlement import UsageAction
from adoptd.modules.entitlement.domain.services.entitlement_service import EntitlementState
from adoptd.modules.plant_ai.domain.models.plant_ai import ChatMessage, ChatRole
from adoptd.modules.plant_ai.domain.repositories.generative_model import GenerativeModel
from adoptd.modules.plant_ai.domain.services.prompts import CHAT_APOLOGY, chat_system_prompt, weather_context
from adoptd.modules.session.domain.services.profile_service import ProfileState
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import ExternalAPIError, NotFoundError, QuotaExceededError
from adoptd.shared.core.observable import StateService
from adoptd.shared.utils.logging import get_logger
from adoptd.shared.utils.validators import require_text

logger = get_logger(__name__)

MAX_MESSAGE_LENGTH = 4000


class ChatConsultant(StateService[Tuple[ChatMessage, ...]]):

    name = "chat"

    def __init__(self, session: SessionState, entitlement: EntitlementState,
                 achievements: AchievementState, profile: ProfileState,
                 weather: WeatherAdviceService, model: GenerativeModel,
                 settings: Optional[Settings] = None):
        super().__init__(session.readiness, session.tasks)
        self.session = session
        self.entitlement = entitlement
        self.achievements = achievements
        self.profile = profile
        self.weather = weather
        self.model = model
        self.settings = settings or get_settings()
        self._history: List[ChatMessage] = []

    @property
    def snapshot(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._history)

    async def refresh(self) -> Tuple[ChatMessage, ...]:
        return self.snapshot

    async def clear(self):
        self._history = []
        await self.broadcast()

    async def send(self, message: str, city: Optional[str] = None,
                   lat: Optional[float] = None, lon: Optional[float] = None) -> ChatMessage:
        """
        Send one user message and return the assistant reply.

        On a model failure an apology is appended to the history and the
        error is re-raised.
        """
        user = self.session.require_user()
        message = require_text(message, "message", MAX_MESSAGE_LENGTH)

        if not await self.entitlement.check_and_increment(UsageAction.CHAT):
            raise QuotaExceededError(
                action=UsageAction.CHAT.value,
                limit=self.entitlement.quota(UsageAction.CHAT) or 0,
            )

        report = await self._weather_for(city, lat, lon)
        is_premium = self.entitlement.is_premium
        system_prompt = chat_system_prompt(
            occupation=self.profile.occupation,
            weather=weather_context(report, include_forecast=is_premium),
            is_premium=is_premium,
        )

        prior_turns = list(self._history)
        self._history.append(ChatMessage(role=ChatRole.USER, content=message))
        await self.broadcast()

        try:
            text = await self.model.chat(prior_turns, f"{system_prompt}\n\n{message}")
        except ExternalAPIError:
            self._history.append(ChatMessage(role=ChatRole.ASSISTANT, content=CHAT_APOLOGY))
            await self.broadcast()
            raise

        reply = ChatMessage(role=ChatRole.ASSISTANT, content=text)
        self._history.append(reply)
        await self.broadcast()

        logger.log_user_action("chatbot_message_sent", user.user_id)
        await self.achievements.record_and_reconcile(ActionType.CHATBOT_MESSAGE_SENT)
        return reply

    async def _weather_for(self, city: Optional[str], lat: Optional[float],
                           lon: Optional[float]) -> Optional[WeatherReport]:
        if not city and (lat is None or lon is None):
            return None
        try:
            return await self.weather.get_report(location_query(city, lat, lon))
        except (ExternalAPIError, NotFoundError) as e:
            logger.warning(f"Chat weather context unavailable: {e.message}")
            return None
