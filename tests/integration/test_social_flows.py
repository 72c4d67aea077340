# =============================================================================
# tests/integration/test_social_flows.py
# Community feed: paging, optimistic likes, comments
# =============================================================================

import pytest

from gardenview.modules.garden_management.application.state.store import EntityKind
from gardenview.shared.core.exceptions import ValidationError

from tests.fakes import USER_ID


def seed_posts(gateway, count, author="friend-1"):
    gateway.seed_profile(user_id=author, display_name="Olive")
    return [
        gateway.seed("social_posts", {"user_id": author, "plant_name": "Fern", "title": f"Post {n}"})
        for n in range(count)
    ]


@pytest.fixture
async def feed(signed_in, gateway):
    """Signed-in controller with the community module switched on and 7 posts in the feed."""
    post_ids = seed_posts(gateway, 7)
    await signed_in.session.update_settings(modules={"social": True})
    return signed_in, post_ids


class TestFeedPaging:
    """Page-sized reads, newest first"""

    async def test_first_page_loaded_when_module_enabled(self, feed, gateway):
        ctrl, post_ids = feed

        titles = [post.title for post in ctrl.store.social_posts]
        assert titles == ["Post 6", "Post 5", "Post 4", "Post 3", "Post 2"]
        assert ctrl.store.social_has_more is True
        assert gateway.called("list_social_posts")[-1] == (0, 5, USER_ID)

    async def test_load_more_appends_until_exhausted(self, feed, gateway):
        ctrl, _ = feed

        assert await ctrl.social.load_more() is True
        assert len(ctrl.store.social_posts) == 7
        assert ctrl.store.social_has_more is False

        calls = len(gateway.called("list_social_posts"))
        assert await ctrl.social.load_more() is False
        assert len(gateway.called("list_social_posts")) == calls

    async def test_author_names_come_from_profiles(self, feed):
        ctrl, _ = feed

        assert {post.author_name for post in ctrl.store.social_posts} == {"Olive"}

    async def test_missing_table_is_silent(self, signed_in, gateway):
        """An unprovisioned feed is empty, without a toast"""
        gateway.missing_table("list_social_posts")

        await signed_in.session.update_settings(modules={"social": True})

        assert signed_in.store.social_posts == []
        assert signed_in.store.social_has_more is False
        assert signed_in.notifier.shown == []

    async def test_feed_error_toasts(self, signed_in, gateway):
        gateway.fail("list_social_posts")

        await signed_in.session.update_settings(modules={"social": True})

        assert signed_in.notifier.last == "Failed to load posts"


class TestLikes:
    """Optimistic like toggling"""

    async def test_like_and_unlike(self, feed, gateway):
        ctrl, post_ids = feed
        post_id = post_ids[-1]

        liked = await ctrl.social.toggle_like(post_id)
        assert (liked.is_liked, liked.likes) == (True, 1)
        assert (post_id, USER_ID) in gateway.likes

        unliked = await ctrl.social.toggle_like(post_id)
        assert (unliked.is_liked, unliked.likes) == (False, 0)
        assert gateway.likes == set()

    async def test_failed_like_rolls_back_without_toast(self, feed, gateway):
        ctrl, post_ids = feed
        post_id = post_ids[-1]
        gateway.fail("insert_like")

        post = await ctrl.social.toggle_like(post_id)

        assert (post.is_liked, post.likes) == (False, 0)
        assert ctrl.store.get(EntityKind.SOCIAL_POSTS, post_id).is_liked is False
        assert ctrl.notifier.shown == []

    async def test_failed_like_kept_when_rollback_disabled(self, feed, gateway):
        ctrl, post_ids = feed
        ctrl.config.LIKE_ROLLBACK_ON_FAILURE = False
        gateway.fail("insert_like")

        post = await ctrl.social.toggle_like(post_ids[-1])

        assert post.is_liked is True


class TestComments:

    async def test_comment_is_appended_with_profile_name(self, feed, gateway):
        """The viewer's own comment shows their display name"""
        ctrl, post_ids = feed
        post_id = post_ids[-1]

        comment = await ctrl.social.add_comment(post_id, "  Lovely fern!  ")

        assert comment.text == "Lovely fern!"
        assert comment.author_name == "Rosa"
        assert gateway.called("insert_comment") == [(post_id, USER_ID, "Lovely fern!")]
        stored = ctrl.store.get(EntityKind.SOCIAL_POSTS, post_id)
        assert [c.text for c in stored.comments] == ["Lovely fern!"]

    async def test_blank_comment_is_ignored(self, feed, gateway):
        ctrl, post_ids = feed

        assert await ctrl.social.add_comment(post_ids[0], "   ") is None
        assert gateway.called("insert_comment") == []

    async def test_overlong_comment_is_rejected(self, feed, gateway):
        ctrl, post_ids = feed

        with pytest.raises(ValidationError):
            await ctrl.social.add_comment(post_ids[-1], "x" * 1001)
        assert gateway.called("insert_comment") == []

    async def test_comment_failure_toasts(self, feed, gateway):
        ctrl, post_ids = feed
        gateway.fail("insert_comment")

        assert await ctrl.social.add_comment(post_ids[-1], "Nice") is None
        assert ctrl.notifier.last == "Failed to comment"
        assert ctrl.store.get(EntityKind.SOCIAL_POSTS, post_ids[-1]).comments == []
