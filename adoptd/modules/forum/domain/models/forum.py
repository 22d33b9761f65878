# 📄 File: adoptd/modules/forum/domain/models/forum.py
# 🧭 Purpose (Layman Explanation):
# Describes community forum content: posts with photos and likes, comments with replies,
# and how sure we are that a like shown on screen matches the server.
# 🧪 Purpose (Technical Summary):
# Forum domain models: Post (updated_at >= created_at, like count never negative),
# Comment reply-tree nodes, comment like toggle outcome, the per-post like sync state
# machine and the forum snapshot broadcast to subscribers.
# 🔗 Dependencies:
# pydantic, enum, datetime, typing
# 🔄 Connected Modules / Calls From:
# ForumState, comment tree builder, forum repository implementation, forum endpoints

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAX_REPLY_DEPTH = 3


class LikeSyncState(str, Enum):
    """
    Per-post like state.

    SYNCED -> OPTIMISTIC on a local toggle; OPTIMISTIC -> SYNCED when the remote
    outcome matches the guess, otherwise -> RECONCILING until the re-fetch lands.
    """
    SYNCED = "synced"
    OPTIMISTIC = "optimistic"
    RECONCILING = "reconciling"


class Author(BaseModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    subscription_tier_id: Optional[int] = None


class Post(BaseModel):
    """Forum post as seen by the current viewer."""

    id: str
    title: str
    content: str
    photo_url: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime
    is_pinned: bool = False
    likes_count: int = Field(default=0, ge=0)
    comment_count: int = Field(default=0, ge=0)
    is_liked: bool = False
    author: Optional[Author] = None

    @model_validator(mode="after")
    def updated_not_before_created(self) -> "Post":
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
        return self


class Comment(BaseModel):
    """
    Comment node. ``replies`` and ``depth`` are filled by the tree builder.
    """

    id: str
    content: str
    user_id: str
    post_id: str
    parent_id: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    likes_count: int = Field(default=0, ge=0)
    author: Optional[Author] = None
    depth: int = 0
    replies: List["Comment"] = []

    @property
    def can_reply(self) -> bool:
        return self.depth < MAX_REPLY_DEPTH


class CommentLikeResult(BaseModel):
    new_likes_count: int
    liked_by_user: bool


class ImageUpload(BaseModel):
    """Raw image bytes received from a client, not yet validated."""

    data: bytes
    filename: str
    content_type: Optional[str] = None


class ForumSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    posts: List[Post] = []
    liked_post_ids: FrozenSet[str] = frozenset()
    like_states: Dict[str, LikeSyncState] = {}
