from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from adoptd.modules.forum.domain.models.forum import (
    Comment,
    ForumSnapshot,
    LikeSyncState,
    Post,
)
from adoptd.shared.utils.validators import MAX_CONTENT_LENGTH


class FeedResponse(BaseModel):
    posts: List[Post]
    like_states: Dict[str, LikeSyncState] = {}
    total: int

    @classmethod
    def from_snapshot(cls, snapshot: ForumSnapshot) -> "FeedResponse":
        return cls(
            posts=snapshot.posts,
            like_states=snapshot.like_states,
            total=len(snapshot.posts),
        )


class PostLikeResponse(BaseModel):
    post: Post
    like_state: LikeSyncState


class PinRequest(BaseModel):
    is_pinned: Optional[bool] = Field(None, description="Omit to flip the current pin")


class CommentCreateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)
    parent_id: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content cannot be empty")
        return v.strip()


class CommentUpdateRequest(BaseModel):
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)


class CommentsResponse(BaseModel):
    post_id: str
    comments: List[Comment]
