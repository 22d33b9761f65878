"""
Forum Repository Implementation

Supabase tables: forum_posts, forum_likes, forum_comments. Like toggles are
remote procedures so the membership flip and counter change stay atomic.
"""

from typing import Any, Dict, List, Optional, Set

from supabase import AsyncClient

from adoptd.modules.forum.domain.models.forum import Author, Comment, CommentLikeResult, Post
from adoptd.modules.forum.domain.repositories.forum_repository import ForumRepository
from adoptd.shared.core.exceptions import GatewayError
from adoptd.shared.infrastructure.database.supabase_repository import SupabaseRepository
from adoptd.shared.infrastructure.storage.supabase_storage import SupabaseStorageClient

AUTHOR_COLUMNS = "author:users ( user_id, name, avatar_url, subscription_tier_id )"
POST_COLUMNS = (
    "id, title, content, photo_url, user_id, created_at, updated_at, is_pinned, "
    f"{AUTHOR_COLUMNS}, forum_likes (count), forum_comments (count)"
)
COMMENT_COLUMNS = f"*, {AUTHOR_COLUMNS}"


def _aggregate_count(value: Any) -> int:
    # PostgREST returns embedded counts as [{"count": n}]
    if isinstance(value, list) and value:
        return int(value[0].get("count") or 0)
    if isinstance(value, dict):
        return int(value.get("count") or 0)
    return 0


class ForumRepositoryImpl(SupabaseRepository, ForumRepository):
    """
    Supabase implementation of the ForumRepository interface.
    """

    def __init__(self, client: AsyncClient, storage: SupabaseStorageClient, photos_bucket: str):
        super().__init__(client)
        self.storage = storage
        self.photos_bucket = photos_bucket

    async def list_posts(self) -> List[Post]:
        rows = await self._execute(
            "forum_posts:list",
            self.table("forum_posts")
            .select(POST_COLUMNS)
            .order("is_pinned", desc=True)
            .order("created_at", desc=True),
        )
        return [self._to_post(row) for row in rows or []]

    async def get_liked_post_ids(self, user_id: str) -> Set[str]:
        rows = await self._execute(
            "forum_likes:list",
            self.table("forum_likes").select("post_id").eq("user_id", user_id),
        )
        return {str(row["post_id"]) for row in rows or []}

    async def toggle_post_like(self, post_id: str, user_id: str) -> bool:
        was_inserted = await self._rpc(
            "toggle_like_and_get_result",
            {"p_post_id": post_id, "p_user_id": user_id},
        )
        return bool(was_inserted)

    async def create_post(self, user_id: str, title: str, content: str,
                          photo_url: Optional[str] = None) -> Post:
        rows = await self._execute(
            "forum_posts:insert",
            self.table("forum_posts").insert({
                "user_id": user_id,
                "title": title,
                "content": content,
                "photo_url": photo_url,
            }),
        )
        if not rows:
            raise GatewayError("forum_posts:insert", "no row returned")
        return self._to_post(rows[0])

    async def update_post(self, post_id: str, data: Dict[str, Any]) -> None:
        await self._execute(
            "forum_posts:update",
            self.table("forum_posts").update(data).eq("id", post_id),
        )

    async def delete_post(self, post_id: str) -> None:
        await self._execute(
            "forum_posts:delete",
            self.table("forum_posts").delete().eq("id", post_id),
        )

    async def set_pinned(self, post_id: str, is_pinned: bool) -> None:
        await self._execute(
            "forum_posts:pin",
            self.table("forum_posts").update({"is_pinned": is_pinned}).eq("id", post_id),
        )

    async def list_comments(self, post_id: str) -> List[Comment]:
        rows = await self._execute(
            "forum_comments:list",
            self.table("forum_comments")
            .select(COMMENT_COLUMNS)
            .eq("post_id", post_id)
            .order("created_at", desc=False),
        )
        return [self._to_comment(row) for row in rows or []]

    async def create_comment(self, post_id: str, user_id: str, content: str,
                             parent_id: Optional[str] = None) -> Comment:
        rows = await self._execute(
            "forum_comments:insert",
            self.table("forum_comments").insert({
                "post_id": post_id,
                "user_id": user_id,
                "content": content,
                "parent_id": parent_id,
            }),
        )
        if not rows:
            raise GatewayError("forum_comments:insert", "no row returned")
        return self._to_comment(rows[0])

    async def update_comment(self, comment_id: str, data: Dict[str, Any]) -> None:
        await self._execute(
            "forum_comments:update",
            self.table("forum_comments").update(data).eq("id", comment_id),
        )

    async def delete_comment(self, comment_id: str) -> None:
        await self._execute(
            "forum_comments:delete",
            self.table("forum_comments").delete().eq("id", comment_id),
        )

    async def toggle_comment_like(self, comment_id: str) -> CommentLikeResult:
        rows = await self._rpc("toggle_comment_like", {"comment_id_to_toggle": comment_id})
        if not rows:
            raise GatewayError("rpc:toggle_comment_like", "empty result")
        row = rows[0] if isinstance(rows, list) else rows
        return CommentLikeResult(
            new_likes_count=row.get("new_likes_count") or 0,
            liked_by_user=bool(row.get("liked_by_user")),
        )

    async def upload_photo(self, user_id: str, file_data: bytes, filename: str,
                           content_type: str) -> str:
        return await self.storage.upload_image(
            self.photos_bucket, user_id, file_data, filename, content_type
        )

    @staticmethod
    def _to_author(row: Optional[Dict[str, Any]]) -> Optional[Author]:
        if not row:
            return None
        return Author(
            user_id=str(row["user_id"]) if row.get("user_id") else None,
            name=row.get("name"),
            avatar_url=row.get("avatar_url"),
            subscription_tier_id=row.get("subscription_tier_id"),
        )

    def _to_post(self, row: Dict[str, Any]) -> Post:
        return Post(
            id=str(row["id"]),
            title=row.get("title") or "",
            content=row.get("content") or "",
            photo_url=row.get("photo_url"),
            user_id=str(row["user_id"]),
            created_at=row["created_at"],
            updated_at=row.get("updated_at") or row["created_at"],
            is_pinned=bool(row.get("is_pinned")),
            likes_count=max(0, _aggregate_count(row.get("forum_likes"))),
            comment_count=max(0, _aggregate_count(row.get("forum_comments"))),
            author=self._to_author(row.get("author")),
        )

    def _to_comment(self, row: Dict[str, Any]) -> Comment:
        parent_id = row.get("parent_id")
        return Comment(
            id=str(row["id"]),
            content=row.get("content") or "",
            user_id=str(row["user_id"]),
            post_id=str(row["post_id"]),
            parent_id=str(parent_id) if parent_id else None,
            created_at=row["created_at"],
            updated_at=row.get("updated_at"),
            likes_count=max(0, row.get("likes_count") or 0),
            author=self._to_author(row.get("author")),
        )
