# 📄 File: adoptd/modules/forum/domain/repositories/forum_repository.py
# 🧭 Purpose (Layman Explanation):
# Lists everything the forum can ask the server for: posts, likes, comments and photos.
# 🧪 Purpose (Technical Summary):
# Abstract repository for forum posts, post like membership and toggles, comments,
# comment like toggles and forum photo uploads.
# 🔗 Dependencies:
# abc, typing, forum domain models
# 🔄 Connected Modules / Calls From:
# ForumState, ForumRepositoryImpl, in-memory test fakes

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Set

from adoptd.modules.forum.domain.models.forum import Comment, CommentLikeResult, Post


class ForumRepository(ABC):
    """
    Abstract repository interface for forum data.
    """

    @abstractmethod
    async def list_posts(self) -> List[Post]:
        """Pinned posts first, then newest first. ``is_liked`` is left False."""
        pass

    @abstractmethod
    async def get_liked_post_ids(self, user_id: str) -> Set[str]:
        pass

    @abstractmethod
    async def toggle_post_like(self, post_id: str, user_id: str) -> bool:
        """Toggle atomically. Returns True when a like row was inserted."""
        pass

    @abstractmethod
    async def create_post(self, user_id: str, title: str, content: str,
                          photo_url: Optional[str] = None) -> Post:
        pass

    @abstractmethod
    async def update_post(self, post_id: str, data: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_post(self, post_id: str) -> None:
        pass

    @abstractmethod
    async def set_pinned(self, post_id: str, is_pinned: bool) -> None:
        pass

    @abstractmethod
    async def list_comments(self, post_id: str) -> List[Comment]:
        """Flat list, oldest first."""
        pass

    @abstractmethod
    async def create_comment(self, post_id: str, user_id: str, content: str,
                             parent_id: Optional[str] = None) -> Comment:
        pass

    @abstractmethod
    async def update_comment(self, comment_id: str, data: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_comment(self, comment_id: str) -> None:
        pass

    @abstractmethod
    async def toggle_comment_like(self, comment_id: str) -> CommentLikeResult:
        pass

    @abstractmethod
    async def upload_photo(self, user_id: str, file_data: bytes, filename: str,
                           content_type: str) -> str:
        """Store a post photo and return its public URL."""
        pass
