"""
Profile Repository Implementation

Reads and upserts the signed-in user's ``users`` row and stores avatars in
the avatars bucket.
"""

from typing import Any, Dict, Optional

from supabase import AsyncClient

from adoptd.modules.session.domain.models.profile import UserProfile
from adoptd.modules.session.domain.repositories.profile_repository import ProfileRepository
from adoptd.shared.infrastructure.database.supabase_repository import SupabaseRepository
from adoptd.shared.infrastructure.storage.supabase_storage import SupabaseStorageClient

PROFILE_COLUMNS = "user_id, name, occupation, avatar_url, role, subscription_tier_id, updated_at"


class ProfileRepositoryImpl(SupabaseRepository, ProfileRepository):

    def __init__(self, client: AsyncClient, storage: SupabaseStorageClient, avatars_bucket: str):
        super().__init__(client)
        self.storage = storage
        self.avatars_bucket = avatars_bucket

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        row = await self._first(
            "users:profile",
            self.table("users").select(PROFILE_COLUMNS).eq("user_id", user_id),
        )
        return self._to_domain(row) if row else None

    async def upsert_profile(self, user_id: str, data: Dict[str, Any]) -> UserProfile:
        rows = await self._execute(
            "users:upsert",
            self.table("users").upsert({"user_id": user_id, **data}, on_conflict="user_id"),
        )
        if rows:
            return self._to_domain(rows[0])
        return await self.get_profile(user_id) or UserProfile(user_id=user_id)

    async def upload_avatar(self, user_id: str, file_data: bytes, filename: str, content_type: str) -> str:
        return await self.storage.upload_image(
            self.avatars_bucket, user_id, file_data, filename, content_type
        )

    @staticmethod
    def _to_domain(row: Dict[str, Any]) -> UserProfile:
        return UserProfile(
            user_id=str(row["user_id"]),
            name=row.get("name"),
            occupation=row.get("occupation"),
            avatar_url=row.get("avatar_url"),
            role=row.get("role") or "user",
            subscription_tier_id=row.get("subscription_tier_id") or 0,
            updated_at=row.get("updated_at"),
        )
