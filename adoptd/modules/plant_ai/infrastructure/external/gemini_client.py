# 📄 File: adoptd/modules/plant_ai/infrastructure/external/gemini_client.py

# 🧭 Purpose (Layman Explanation):
# Sends plant photos and chat messages to Google's Gemini model and brings back its answers.

# 🧪 Purpose (Technical Summary):
# GenerativeModel implementation over google-generativeai. Image prompts go through
# generate_content_async with inline image bytes; chat replays prior turns into
# start_chat history and calls send_message_async. SDK and blocked-response failures
# are raised as ExternalAPIError.

# 🔗 Dependencies:
# - google-generativeai: Gemini SDK
# - google-api-core: SDK error types
# - Settings: GEMINI_API_KEY, GEMINI_MODEL, GEMINI_CHAT_TEMPERATURE, GEMINI_CHAT_MAX_TOKENS

# 🔄 Connected Modules / Calls From:
# PlantScanner, ChatConsultant, application container

import time
from typing import Any, Dict, List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from adoptd.modules.plant_ai.domain.models.plant_ai import ChatMessage, ChatRole
from adoptd.modules.plant_ai.domain.repositories.generative_model import GenerativeModel
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import ExternalAPIError
from adoptd.shared.utils.logging import get_logger

logger = get_logger(__name__)

API_NAME = "gemini"


class GeminiClient(GenerativeModel):
    """
    Gemini-backed generative model.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        genai.configure(api_key=self.settings.GEMINI_API_KEY)
        self._vision_model = genai.GenerativeModel(self.settings.GEMINI_MODEL)
        self._chat_model = genai.GenerativeModel(
            self.settings.GEMINI_MODEL,
            generation_config=genai.GenerationConfig(
                temperature=self.settings.GEMINI_CHAT_TEMPERATURE,
                top_k=32,
                top_p=0.95,
                max_output_tokens=self.settings.GEMINI_CHAT_MAX_TOKENS,
            ),
        )

    async def generate(self, prompt: str, image: bytes, mime_type: str) -> str:
        start_time = time.monotonic()
        try:
            response = await self._vision_model.generate_content_async(
                [prompt, {"mime_type": mime_type, "data": image}]
            )
            text = response.text
        except (google_exceptions.GoogleAPIError, ValueError) as e:
            self._log_call("generate_content", start_time, success=False)
            raise ExternalAPIError(message=f"Image analysis failed: {e}", api_name=API_NAME) from e

        self._log_call("generate_content", start_time, success=True)
        return text

    async def chat(self, history: List[ChatMessage], message: str) -> str:
        start_time = time.monotonic()
        try:
            session = self._chat_model.start_chat(history=[self._to_content(m) for m in history])
            response = await session.send_message_async(message)
            text = response.text
        except (google_exceptions.GoogleAPIError, ValueError) as e:
            self._log_call("send_message", start_time, success=False)
            raise ExternalAPIError(message=f"Chat request failed: {e}", api_name=API_NAME) from e

        self._log_call("send_message", start_time, success=True)
        return text

    @staticmethod
    def _to_content(message: ChatMessage) -> Dict[str, Any]:
        role = "user" if message.role == ChatRole.USER else "model"
        return {"role": role, "parts": [message.content]}

    @staticmethod
    def _log_call(endpoint: str, start_time: float, success: bool):
        logger.log_external_api_call(
            api_name=API_NAME,
            endpoint=endpoint,
            status_code=200 if success else 502,
            duration_ms=(time.monotonic() - start_time) * 1000,
            success=success,
        )
