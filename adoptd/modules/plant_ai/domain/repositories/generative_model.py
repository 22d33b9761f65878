from abc import ABC, abstractmethod
from typing import List

from adoptd.modules.plant_ai.domain.models.plant_ai import ChatMessage


class GenerativeModel(ABC):
    """
    Abstract generative endpoint: one-shot image prompts and multi-turn chat.
    """

    @abstractmethod
    async def generate(self, prompt: str, image: bytes, mime_type: str) -> str:
        """Answer a prompt about an image."""
        pass

    @abstractmethod
    async def chat(self, history: List[ChatMessage], message: str) -> str:
        """Continue a conversation given prior turns, oldest first."""
        pass
