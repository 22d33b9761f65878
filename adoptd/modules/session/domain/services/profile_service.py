"""
Profile state: display name, occupation and avatar of the signed-in user.
"""

from datetime import datetime, timezone
from typing import Optional

from adoptd.modules.session.domain.models.profile import ProfileUpdate, UserProfile
from adoptd.modules.session.domain.repositories.profile_repository import ProfileRepository
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.observable import StateService
from adoptd.shared.utils.logging import get_logger
from adoptd.shared.utils.validators import validate_image_upload

logger = get_logger(__name__)


class ProfileState(StateService[Optional[UserProfile]]):
    name = "profile"

    def __init__(self, session: SessionState, repository: ProfileRepository,
                 settings: Optional[Settings] = None):
        super().__init__(session.readiness, session.tasks)
        self.session = session
        self.repository = repository
        self.settings = settings or get_settings()
        self._profile: Optional[UserProfile] = None

    @property
    def snapshot(self) -> Optional[UserProfile]:
        return self._profile

    @property
    def occupation(self) -> Optional[str]:
        if self._profile and self._profile.occupation:
            return self._profile.occupation
        return None

    async def refresh(self) -> UserProfile:
        user = self.session.require_user()
        token = self._freshness.issue()
        profile = await self.repository.get_profile(user.user_id)
        if self._freshness.is_current(token):
            self._profile = profile or UserProfile(user_id=user.user_id)
            await self.broadcast()
        return self._profile

    async def update(self, update: ProfileUpdate) -> UserProfile:
        user = self.session.require_user()
        data = {
            key: value.strip()
            for key, value in update.model_dump(exclude_none=True).items()
        }
        data["updated_at"] = datetime.now(timezone.utc).isoformat()

        self._freshness.issue()
        self._profile = await self.repository.upsert_profile(user.user_id, data)
        await self.broadcast()
        logger.log_user_action("profile_updated", user.user_id, resource="users")
        return self._profile

    async def upload_avatar(self, file_data: bytes, filename: str, content_type: str) -> UserProfile:
        user = self.session.require_user()
        media_type = validate_image_upload(
            content_type, len(file_data), self.settings.MAX_IMAGE_SIZE, filename
        )

        avatar_url = await self.repository.upload_avatar(user.user_id, file_data, filename, media_type)
        self._freshness.issue()
        self._profile = await self.repository.upsert_profile(user.user_id, {
            "avatar_url": avatar_url,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        await self.broadcast()
        logger.log_user_action("avatar_uploaded", user.user_id, resource="avatars")
        return self._profile
