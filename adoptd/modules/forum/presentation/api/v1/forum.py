# 📄 File: adoptd/modules/forum/presentation/api/v1/forum.py
# 🧭 Purpose (Layman Explanation):
# The community board: read the feed, write and edit posts with an optional photo,
# like posts and comments, reply to each other, and let admins pin important posts.
# 🧪 Purpose (Technical Summary):
# Thin FastAPI layer over ForumState. Post create/update accept multipart form data
# so a photo can travel with the text; everything else is JSON. Like toggles return
# the post together with its like sync state.
# 🔗 Dependencies:
# FastAPI router, Form/File uploads, ForumState via UserScope
# 🔄 Connected Modules / Calls From:
# adoptd.api.v1.router (router inclusion), forum pages of the web client

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from adoptd.container import UserScope
from adoptd.modules.forum.domain.models.forum import CommentLikeResult, ImageUpload, Post
from adoptd.modules.forum.presentation.api.schemas.forum_schemas import (
    CommentCreateRequest,
    CommentsResponse,
    CommentUpdateRequest,
    FeedResponse,
    PinRequest,
    PostLikeResponse,
)
from adoptd.shared.core.dependencies import get_scope
from adoptd.shared.core.exceptions import ExternalAPIError, NotFoundError

forum_router = APIRouter()


async def _image_upload(photo: Optional[UploadFile]) -> Optional[ImageUpload]:
    if photo is None or not photo.filename:
        return None
    return ImageUpload(
        data=await photo.read(),
        filename=photo.filename,
        content_type=photo.content_type,
    )


def _loaded_post(scope: UserScope, post_id: str) -> Post:
    post = scope.forum.get_post(post_id)
    if post is None:
        raise NotFoundError(message="Post not found", resource_type="post", resource_id=post_id)
    return post


# Posts

@forum_router.get(
    "/posts",
    response_model=FeedResponse,
    summary="Forum feed, pinned posts first",
)
async def list_posts(refresh: bool = False, scope: UserScope = Depends(get_scope)) -> FeedResponse:
    if refresh or not scope.forum.snapshot.posts:
        await scope.forum.refresh()
    return FeedResponse.from_snapshot(scope.forum.snapshot)


@forum_router.get(
    "/posts/{post_id}",
    response_model=Post,
    summary="Single post from the loaded feed",
)
async def get_post(post_id: str, scope: UserScope = Depends(get_scope)) -> Post:
    return _loaded_post(scope, post_id)


@forum_router.post(
    "/posts",
    response_model=Post,
    status_code=status.HTTP_201_CREATED,
    summary="Create a post",
    responses={
        400: {"description": "Unsupported image type"},
        422: {"description": "Empty title or content"},
        413: {"description": "Image too large"},
    },
)
async def create_post(
    title: str = Form(...),
    content: str = Form(...),
    photo: Optional[UploadFile] = File(None),
    scope: UserScope = Depends(get_scope),
) -> Post:
    return await scope.forum.create_post(title, content, await _image_upload(photo))


@forum_router.put(
    "/posts/{post_id}",
    response_model=Post,
    summary="Edit a post",
    responses={403: {"description": "Not the author"}},
)
async def update_post(
    post_id: str,
    title: str = Form(...),
    content: str = Form(...),
    photo: Optional[UploadFile] = File(None),
    scope: UserScope = Depends(get_scope),
) -> Post:
    await scope.forum.update_post(post_id, title, content, await _image_upload(photo))
    return _loaded_post(scope, post_id)


@forum_router.delete(
    "/posts/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a post",
)
async def delete_post(post_id: str, scope: UserScope = Depends(get_scope)) -> Response:
    await scope.forum.delete_post(post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@forum_router.post(
    "/posts/{post_id}/like",
    response_model=PostLikeResponse,
    summary="Toggle like on a post",
)
async def toggle_post_like(post_id: str, scope: UserScope = Depends(get_scope)) -> PostLikeResponse:
    post = await scope.forum.toggle_post_like(post_id)
    return PostLikeResponse(post=post, like_state=scope.forum.like_state(post_id))


@forum_router.post(
    "/posts/{post_id}/pin",
    response_model=Post,
    summary="Pin or unpin a post (admin)",
    responses={403: {"description": "Administrator role required"}},
)
async def pin_post(
    post_id: str,
    request: Optional[PinRequest] = None,
    scope: UserScope = Depends(get_scope),
) -> Post:
    await scope.forum.toggle_pin(post_id, request.is_pinned if request else None)
    return _loaded_post(scope, post_id)


# Comments

@forum_router.get(
    "/posts/{post_id}/comments",
    response_model=CommentsResponse,
    summary="Comment tree of a post",
)
async def get_comments(post_id: str, scope: UserScope = Depends(get_scope)) -> CommentsResponse:
    return CommentsResponse(post_id=post_id, comments=await scope.forum.get_comments(post_id))


@forum_router.post(
    "/posts/{post_id}/comments",
    response_model=CommentsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Comment on a post or reply to a comment",
)
async def create_comment(
    post_id: str,
    request: CommentCreateRequest,
    scope: UserScope = Depends(get_scope),
) -> CommentsResponse:
    await scope.forum.create_comment(post_id, request.content, request.parent_id)
    return CommentsResponse(post_id=post_id, comments=await scope.forum.get_comments(post_id))


@forum_router.put(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Edit a comment",
)
async def update_comment(
    comment_id: str,
    request: CommentUpdateRequest,
    scope: UserScope = Depends(get_scope),
) -> Response:
    await scope.forum.update_comment(comment_id, request.content)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@forum_router.delete(
    "/comments/{comment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a comment",
)
async def delete_comment(comment_id: str, scope: UserScope = Depends(get_scope)) -> Response:
    await scope.forum.delete_comment(comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@forum_router.post(
    "/comments/{comment_id}/like",
    response_model=CommentLikeResult,
    summary="Toggle like on a comment",
    responses={502: {"description": "Like could not be saved"}},
)
async def toggle_comment_like(comment_id: str, scope: UserScope = Depends(get_scope)) -> CommentLikeResult:
    result = await scope.forum.toggle_comment_like(comment_id)
    if result is None:
        raise ExternalAPIError(message="Comment like could not be saved", api_name="supabase")
    return result
