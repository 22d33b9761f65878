"""Profile data access interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from adoptd.modules.session.domain.models.profile import UserProfile


class ProfileRepository(ABC):

    @abstractmethod
    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Get profile by user ID; None when the row does not exist yet."""
        pass

    @abstractmethod
    async def upsert_profile(self, user_id: str, data: Dict[str, Any]) -> UserProfile:
        """Create or update the user's row with the given columns."""
        pass

    @abstractmethod
    async def upload_avatar(self, user_id: str, file_data: bytes, filename: str, content_type: str) -> str:
        """Store an avatar image and return its public URL."""
        pass
