# 📄 File: adoptd/modules/forum/domain/services/forum_service.py
# 🧭 Purpose (Layman Explanation):
# Runs the community forum for one signed-in user: shows posts, lets them like posts
# instantly (fixing things up if the server disagrees), and handles posts and comments.
# 🧪 Purpose (Technical Summary):
# Observable forum state. Post likes are applied optimistically with a per-post
# SYNCED/OPTIMISTIC/RECONCILING state machine; any local mutation issues a freshness
# token so an in-flight fetch cannot overwrite it. A remote mismatch or failure
# triggers a full re-fetch of posts and like membership. Comments are fetched flat
# and arranged into a reply tree capped at three levels.
# 🔗 Dependencies:
# ForumRepository, SessionState, AchievementState, comment tree builder, validators
# 🔄 Connected Modules / Calls From:
# UserScope, forum endpoints

from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from adoptd.modules.achievements.domain.models.achievement import ActionType
from adoptd.modules.achievements.domain.services.achievement_service import AchievementState
from adoptd.modules.forum.domain.models.forum import (
    MAX_REPLY_DEPTH,
    Comment,
    CommentLikeResult,
    ForumSnapshot,
    ImageUpload,
    LikeSyncState,
    Post,
)
from adoptd.modules.forum.domain.repositories.forum_repository import ForumRepository
from adoptd.modules.forum.domain.services.comment_tree import build_comment_tree, find_comment
from adoptd.modules.session.domain.services.session_service import SessionState
from adoptd.shared.config.settings import Settings, get_settings
from adoptd.shared.core.exceptions import (
    AuthorizationError,
    ExternalAPIError,
    NotFoundError,
    ValidationError,
)
from adoptd.shared.core.observable import StateService
from adoptd.shared.utils.logging import get_logger
from adoptd.shared.utils.validators import MAX_TITLE_LENGTH, require_text, validate_image_upload

logger = get_logger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ForumState(StateService[ForumSnapshot]):
    """
    Forum posts, the viewer's like membership and comment operations.
    """

    name = "forum"

    def __init__(self, session: SessionState, repository: ForumRepository,
                 achievements: AchievementState, settings: Optional[Settings] = None):
        super().__init__(session.readiness, session.tasks)
        self.session = session
        self.repository = repository
        self.achievements = achievements
        self.settings = settings or get_settings()
        self._posts: List[Post] = []
        self._liked: Set[str] = set()
        self._like_states: Dict[str, LikeSyncState] = {}

    @property
    def snapshot(self) -> ForumSnapshot:
        return ForumSnapshot(
            posts=[p.model_copy(update={"is_liked": p.id in self._liked}) for p in self._posts],
            liked_post_ids=frozenset(self._liked),
            like_states=dict(self._like_states),
        )

    def like_state(self, post_id: str) -> LikeSyncState:
        return self._like_states.get(post_id, LikeSyncState.SYNCED)

    def get_post(self, post_id: str) -> Optional[Post]:
        for post in self._posts:
            if post.id == post_id:
                return post.model_copy(update={"is_liked": post.id in self._liked})
        return None

    async def refresh(self) -> ForumSnapshot:
        """Fetch posts and the viewer's liked post ids together."""
        user = self.session.require_user()
        token = self._freshness.issue()
        self.loading = True
        try:
            posts = await self.repository.list_posts()
            liked = await self.repository.get_liked_post_ids(user.user_id)
        finally:
            self.loading = False

        if not self._freshness.is_current(token):
            logger.debug("Discarding stale forum fetch")
            return self.snapshot

        self._posts = posts
        self._liked = set(liked)
        self._like_states = {}
        await self.broadcast()
        return self.snapshot

    # Likes

    async def toggle_post_like(self, post_id: str) -> Post:
        """
        Flip the like locally, then confirm with the server.

        Raises:
            NotFoundError: post is not in the loaded feed
            ExternalAPIError: remote toggle failed (state already re-fetched)
        """
        user = self.session.require_user()
        if self.get_post(post_id) is None:
            raise NotFoundError(message="Post not found", resource_type="post", resource_id=post_id)

        expect_liked = post_id not in self._liked
        self._apply_like(post_id, expect_liked)
        self._like_states[post_id] = LikeSyncState.OPTIMISTIC
        await self.broadcast()

        try:
            inserted = await self.repository.toggle_post_like(post_id, user.user_id)
        except ExternalAPIError as e:
            logger.error(f"Like toggle failed for post {post_id}: {e.message}", user_id=user.user_id)
            await self._reconcile(post_id)
            raise

        if inserted != expect_liked:
            logger.warning(
                f"Like toggle for post {post_id} disagreed with local state",
                expected=expect_liked,
                actual=inserted,
            )
            await self._reconcile(post_id)
        else:
            self._like_states[post_id] = LikeSyncState.SYNCED
            await self.broadcast()

        if inserted:
            await self.achievements.record_and_reconcile(ActionType.POST_LIKED, post_id)

        return self.get_post(post_id)

    def _apply_like(self, post_id: str, liked: bool):
        self._freshness.issue()
        delta = 1 if liked else -1
        if liked:
            self._liked.add(post_id)
        else:
            self._liked.discard(post_id)
        self._posts = [
            p.model_copy(update={"likes_count": max(0, p.likes_count + delta)}) if p.id == post_id else p
            for p in self._posts
        ]

    async def _reconcile(self, post_id: str):
        self._like_states[post_id] = LikeSyncState.RECONCILING
        await self.broadcast()
        try:
            await self.refresh()
        except ExternalAPIError as e:
            logger.error(f"Forum re-fetch after like failure failed: {e.message}")

    async def toggle_comment_like(self, comment_id: str) -> Optional[CommentLikeResult]:
        """Server-authoritative toggle; None when the call fails."""
        self.session.require_user()
        try:
            result = await self.repository.toggle_comment_like(comment_id)
        except ExternalAPIError as e:
            logger.error(f"Comment like toggle failed for {comment_id}: {e.message}")
            return None

        if result.liked_by_user:
            await self.achievements.record_and_reconcile(ActionType.COMMENT_LIKED, comment_id)
        return result

    # Posts

    async def create_post(self, title: str, content: str, photo: Optional[ImageUpload] = None) -> Post:
        user = self.session.require_user()
        title = require_text(title, "title", MAX_TITLE_LENGTH)
        content = require_text(content, "content")

        photo_url = await self._upload_photo(user.user_id, photo) if photo else None
        post = await self.repository.create_post(user.user_id, title, content, photo_url)
        logger.log_user_action("post_created", user.user_id, resource=post.id)

        await self.achievements.record_and_reconcile(ActionType.POST_CREATED, post.id)
        await self.refresh()
        return post

    async def update_post(self, post_id: str, title: str, content: str,
                          photo: Optional[ImageUpload] = None) -> Optional[Post]:
        user = self._require_author(post_id)
        data = {
            "title": require_text(title, "title", MAX_TITLE_LENGTH),
            "content": require_text(content, "content"),
            "updated_at": _now_iso(),
        }
        if photo:
            data["photo_url"] = await self._upload_photo(user.user_id, photo)

        await self.repository.update_post(post_id, data)
        logger.log_user_action("post_updated", user.user_id, resource=post_id)
        await self.refresh()
        return self.get_post(post_id)

    async def delete_post(self, post_id: str):
        user = self._require_author(post_id)
        await self.repository.delete_post(post_id)
        logger.log_user_action("post_deleted", user.user_id, resource=post_id)
        await self.refresh()

    async def toggle_pin(self, post_id: str, is_pinned: Optional[bool] = None) -> Optional[Post]:
        """Administrators only. Flips the current pin when ``is_pinned`` is omitted."""
        admin = self.session.require_admin()
        if is_pinned is None:
            post = self.get_post(post_id)
            if post is None:
                raise NotFoundError(message="Post not found", resource_type="post", resource_id=post_id)
            is_pinned = not post.is_pinned

        await self.repository.set_pinned(post_id, is_pinned)
        logger.log_business_event(
            "post_pinned" if is_pinned else "post_unpinned",
            f"Post {post_id} pin set to {is_pinned} by {admin.user_id}",
            entity_id=post_id,
            entity_type="forum_post",
        )
        await self.refresh()
        return self.get_post(post_id)

    async def _upload_photo(self, user_id: str, photo: ImageUpload) -> str:
        media_type = validate_image_upload(
            photo.content_type, len(photo.data), self.settings.MAX_IMAGE_SIZE, photo.filename
        )
        return await self.repository.upload_photo(user_id, photo.data, photo.filename, media_type)

    def _require_author(self, post_id: str):
        user = self.session.require_user()
        post = self.get_post(post_id)
        if post is not None and post.user_id != user.user_id and not user.is_admin:
            raise AuthorizationError(
                message="Only the author can change this post",
                resource_type="post",
                resource_id=post_id,
                user_id=user.user_id,
            )
        return user

    # Comments

    async def get_comments(self, post_id: str) -> List[Comment]:
        comments = await self.repository.list_comments(post_id)
        return build_comment_tree(comments)

    async def create_comment(self, post_id: str, content: str, parent_id: Optional[str] = None) -> Comment:
        """
        Add a comment or a reply.

        A reply's parent must belong to the same post and sit above the
        depth cap.
        """
        user = self.session.require_user()
        content = require_text(content, "content")

        if parent_id:
            parent = find_comment(await self.get_comments(post_id), parent_id)
            if parent is None:
                raise ValidationError(
                    message="Parent comment does not belong to this post",
                    field="parent_id",
                    value=parent_id,
                )
            if not parent.can_reply:
                raise ValidationError(
                    message=f"Replies are limited to {MAX_REPLY_DEPTH} levels",
                    field="parent_id",
                    value=parent_id,
                    constraint=f"depth < {MAX_REPLY_DEPTH}",
                )

        comment = await self.repository.create_comment(post_id, user.user_id, content, parent_id)
        logger.log_user_action("comment_created", user.user_id, resource=post_id)

        await self.achievements.record_and_reconcile(ActionType.COMMENT_CREATED, comment.id)
        await self.refresh()
        return comment

    async def update_comment(self, comment_id: str, content: str):
        user = self.session.require_user()
        await self.repository.update_comment(comment_id, {
            "content": require_text(content, "content"),
            "updated_at": _now_iso(),
        })
        logger.log_user_action("comment_updated", user.user_id, resource=comment_id)

    async def delete_comment(self, comment_id: str):
        user = self.session.require_user()
        await self.repository.delete_comment(comment_id)
        logger.log_user_action("comment_deleted", user.user_id, resource=comment_id)
        await self.refresh()
