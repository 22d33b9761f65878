"""Tests for the forum state: optimistic likes, posts, comments and the reply tree."""

import asyncio

import pytest

from adoptd.modules.achievements.domain.models.achievement import ActionType
from adoptd.modules.forum.domain.models.forum import ImageUpload, LikeSyncState
from adoptd.modules.forum.domain.services.comment_tree import build_comment_tree, find_comment
from adoptd.shared.core.exceptions import (
    AuthorizationError,
    ExternalAPIError,
    InvalidFileTypeError,
    NotFoundError,
    ValidationError,
)
from tests.fakes import USER_ID, make_comment


def _liked_actions(achievement_repo, action=ActionType.POST_LIKED):
    return [a for a in achievement_repo.actions if a[1] is action]


# =============================================================================
# Feed
# =============================================================================


class TestFeed:
    async def test_refresh_lists_pinned_first(self, scope):
        snapshot = await scope.forum.refresh()

        assert [p.id for p in snapshot.posts] == ["p2", "p1"]
        assert snapshot.liked_post_ids == frozenset()

    async def test_stale_fetch_is_discarded(self, scope, forum_repo):
        """A fetch that started before a local like must not overwrite it."""
        await scope.forum.refresh()
        forum_repo.list_gate = asyncio.Event()

        slow_refresh = asyncio.create_task(scope.forum.refresh())
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        await scope.forum.toggle_post_like("p1")
        forum_repo.list_gate.set()
        await slow_refresh

        post = scope.forum.get_post("p1")
        assert post.likes_count == 4
        assert post.is_liked is True


# =============================================================================
# Post likes
# =============================================================================


class TestPostLikes:
    async def test_like_then_unlike_restores_state(self, scope, achievement_repo):
        await scope.forum.refresh()

        liked = await scope.forum.toggle_post_like("p1")
        assert liked.likes_count == 4
        assert liked.is_liked is True
        assert scope.forum.like_state("p1") is LikeSyncState.SYNCED

        unliked = await scope.forum.toggle_post_like("p1")
        assert unliked.likes_count == 3
        assert unliked.is_liked is False
        assert scope.forum.like_state("p1") is LikeSyncState.SYNCED

        # unliking records nothing
        assert _liked_actions(achievement_repo) == [(USER_ID, ActionType.POST_LIKED, "p1")]

    async def test_listeners_see_optimistic_state_first(self, scope):
        await scope.forum.refresh()
        seen = []
        scope.forum.subscribe(lambda snapshot: seen.append(snapshot.like_states.get("p1")))

        await scope.forum.toggle_post_like("p1")

        assert seen[0] is LikeSyncState.OPTIMISTIC
        assert LikeSyncState.SYNCED in seen

    async def test_remote_disagreement_reconciles_to_server(self, scope, forum_repo, achievement_repo):
        await scope.forum.refresh()
        # liked elsewhere after our last fetch
        forum_repo.likes.add(("p1", USER_ID))

        post = await scope.forum.toggle_post_like("p1")

        assert post.is_liked is False
        assert post.likes_count == 3
        assert scope.forum.like_state("p1") is LikeSyncState.SYNCED
        assert _liked_actions(achievement_repo) == []

    async def test_remote_failure_refetches_and_raises(self, scope, forum_repo):
        await scope.forum.refresh()
        forum_repo.fail_toggle = True

        with pytest.raises(ExternalAPIError):
            await scope.forum.toggle_post_like("p1")

        post = scope.forum.get_post("p1")
        assert post.is_liked is False
        assert post.likes_count == 3

    async def test_unknown_post_is_not_found(self, scope):
        await scope.forum.refresh()

        with pytest.raises(NotFoundError):
            await scope.forum.toggle_post_like("missing")


# =============================================================================
# Posts
# =============================================================================


class TestPosts:
    async def test_create_post_records_action(self, scope, forum_repo, achievement_repo):
        await scope.forum.refresh()

        post = await scope.forum.create_post("  Жёлтые листья  ", "Что делать?")

        assert post.title == "Жёлтые листья"
        assert post.id in forum_repo.posts
        assert _liked_actions(achievement_repo, ActionType.POST_CREATED) == [
            (USER_ID, ActionType.POST_CREATED, post.id)
        ]
        assert scope.forum.get_post(post.id) is not None

    async def test_photo_is_validated_before_upload(self, scope, forum_repo):
        photo = ImageUpload(data=b"%PDF-1.4", filename="scan.pdf", content_type="application/pdf")

        with pytest.raises(InvalidFileTypeError):
            await scope.forum.create_post("Title", "Body", photo)

        assert forum_repo.uploads == []
        assert len(forum_repo.posts) == 2

    async def test_photo_upload_sets_url(self, scope, forum_repo):
        photo = ImageUpload(data=b"\xff\xd8\xff", filename="leaf.jpg", content_type="image/jpeg")

        post = await scope.forum.create_post("Лист", "Пятна на листе", photo)

        assert post.photo_url.endswith("/leaf.jpg")

    async def test_blank_title_is_rejected(self, scope):
        with pytest.raises(ValidationError):
            await scope.forum.create_post("   ", "Body")

    async def test_only_author_may_edit(self, scope):
        await scope.forum.refresh()

        with pytest.raises(AuthorizationError):
            await scope.forum.update_post("p1", "New title", "New body")

    async def test_pin_requires_admin(self, scope):
        await scope.forum.refresh()

        with pytest.raises(AuthorizationError):
            await scope.forum.toggle_pin("p1")

    async def test_admin_flips_pin(self, scope, auth_repo, forum_repo):
        auth_repo.roles[USER_ID] = "admin"
        await scope.session.refresh()
        await scope.forum.refresh()

        post = await scope.forum.toggle_pin("p1")

        assert forum_repo.pins == [("p1", True)]
        assert post.is_pinned is True


# =============================================================================
# Comments
# =============================================================================


class TestComments:
    @pytest.fixture
    def thread(self, forum_repo):
        forum_repo.comments = [
            make_comment("c1", minutes=0),
            make_comment("c2", parent_id="c1", minutes=1),
            make_comment("c3", parent_id="c2", minutes=2),
            make_comment("c4", parent_id="c3", minutes=3),
            make_comment("x1", post_id="p2", minutes=4),
        ]
        return forum_repo

    async def test_reply_below_cap_is_accepted(self, scope, thread, achievement_repo):
        comment = await scope.forum.create_comment("p1", "Согласен", parent_id="c3")

        assert comment.parent_id == "c3"
        assert _liked_actions(achievement_repo, ActionType.COMMENT_CREATED)

    async def test_reply_at_cap_is_rejected(self, scope, thread):
        with pytest.raises(ValidationError):
            await scope.forum.create_comment("p1", "Слишком глубоко", parent_id="c4")

    async def test_parent_from_another_post_is_rejected(self, scope, thread):
        with pytest.raises(ValidationError):
            await scope.forum.create_comment("p1", "Не туда", parent_id="x1")

    async def test_comment_like_failure_returns_none(self, scope, forum_repo, achievement_repo):
        forum_repo.fail_toggle = True

        assert await scope.forum.toggle_comment_like("c1") is None
        assert _liked_actions(achievement_repo, ActionType.COMMENT_LIKED) == []

    async def test_comment_like_records_only_on_like(self, scope, achievement_repo):
        first = await scope.forum.toggle_comment_like("c1")
        second = await scope.forum.toggle_comment_like("c1")

        assert first.liked_by_user is True
        assert second.liked_by_user is False
        assert len(_liked_actions(achievement_repo, ActionType.COMMENT_LIKED)) == 1


class TestCommentTree:
    def test_depths_follow_reply_chain(self):
        roots = build_comment_tree([
            make_comment("c1"),
            make_comment("c2", parent_id="c1", minutes=1),
            make_comment("c3", parent_id="c2", minutes=2),
        ])

        assert [r.id for r in roots] == ["c1"]
        c3 = find_comment(roots, "c3")
        assert c3.depth == 2
        assert c3.can_reply is True

    def test_orphans_become_roots(self):
        roots = build_comment_tree([
            make_comment("c1"),
            make_comment("c2", parent_id="deleted", minutes=1),
        ])

        assert {r.id for r in roots} == {"c1", "c2"}
        assert all(r.depth == 0 for r in roots)

    def test_nodes_past_the_cap_are_lifted(self):
        chain = [make_comment("c0")] + [
            make_comment(f"c{i}", parent_id=f"c{i - 1}", minutes=i) for i in range(1, 6)
        ]

        roots = build_comment_tree(chain, max_depth=3)

        deepest = find_comment(roots, "c5")
        assert deepest.depth == 3
        assert find_comment(roots, "c2").replies[0].id == "c3"
        assert {r.id for r in find_comment(roots, "c2").replies} == {"c3", "c4", "c5"}

    def test_reply_cycle_does_not_lose_comments(self):
        roots = build_comment_tree([
            make_comment("a", parent_id="b"),
            make_comment("b", parent_id="a", minutes=1),
        ])

        assert find_comment(roots, "a") is not None
        assert find_comment(roots, "b") is not None

    def test_input_is_not_mutated(self):
        original = make_comment("c2", parent_id="missing")

        build_comment_tree([original])

        assert original.parent_id == "missing"
        assert original.replies == []
