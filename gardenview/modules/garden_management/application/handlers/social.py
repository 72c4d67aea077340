# 📄 File: gardenview/modules/garden_management/application/handlers/social.py
# 🧭 Purpose (Layman Explanation):
# The shared "World" feed: scrolling through other gardeners' posts, liking them and
# leaving comments.
#
# 🧪 Purpose (Technical Summary):
# Social handler group. Paging goes through DataLoader.fetch_social_page; likes are
# applied optimistically and rolled back on failure when LIKE_ROLLBACK_ON_FAILURE is
# set; comments are appended only after the insert returns.
#
# 🔗 Dependencies:
# - DataLoader (feed paging), GardenGateway via HandlerContext
# - gardenview.shared.utils.validators (comment length)
#
# 🔄 Connected Modules / Calls From:
# - GardenController.social
# - World tab, post details screen

from typing import Optional

from gardenview.shared.core.exceptions import NotFoundError, ValidationError
from gardenview.shared.utils.logging import get_logger
from gardenview.shared.utils.validators import COMMENT_MAX_LENGTH, validate_text_content
from ...domain.models import SocialComment, SocialPost
from ...infrastructure.database.mappers import UNKNOWN_COMMENTER
from ..state.store import EntityKind
from .base import HandlerBase

logger = get_logger(__name__)

COMMENT_FAILED_TOAST = "Failed to comment"
DEFAULT_COMMENT_AUTHOR = "Me"


class SocialHandlers(HandlerBase):
    """Feed paging, likes and comments."""

    def _post(self, post_id: str) -> SocialPost:
        post = self.store.get(EntityKind.SOCIAL_POSTS, post_id)
        if post is None:
            raise NotFoundError("Post not found", resource_type="social_post", resource_id=post_id)
        return post

    # ===== FEED =====

    async def fetch_page(self, page: int = 0, reset: bool = False) -> bool:
        self._require_user()
        async with self._command("fetch_social_page"):
            return await self.loader.fetch_social_page(page, reset=reset)

    async def load_more(self) -> bool:
        """Next feed page; does nothing once the last page has been read."""
        if not self.store.social_has_more:
            return False
        return await self.fetch_page(self.store.social_page + 1)

    async def refresh(self) -> bool:
        return await self.fetch_page(0, reset=True)

    # ===== LIKES =====

    async def toggle_like(self, post_id: str) -> Optional[SocialPost]:
        """
        Flip the viewer's like on a post.

        The store changes before the request. A failed request is logged without a
        toast and, when rollback is enabled, the flip is undone.
        """
        user = self._require_user()
        post = self._post(post_id)
        toggled = post.toggled_like()
        self.store.upsert(EntityKind.SOCIAL_POSTS, toggled)

        if toggled.is_liked:
            result = await self.gateway.insert_like(post_id, user.id)
        else:
            result = await self.gateway.delete_like(post_id, user.id)

        if result.ok:
            return toggled

        self._fail("toggle_like", result.error, None)
        if self.config.LIKE_ROLLBACK_ON_FAILURE:
            current = self.store.get(EntityKind.SOCIAL_POSTS, post_id)
            if current is not None and current.is_liked == toggled.is_liked:
                self.store.upsert(EntityKind.SOCIAL_POSTS, current.toggled_like())
        return self.store.get(EntityKind.SOCIAL_POSTS, post_id)

    # ===== COMMENTS =====

    async def add_comment(self, post_id: str, text: str) -> Optional[SocialComment]:
        """
        Comment on a post.

        Blank text is ignored.

        Raises:
            ValidationError: The comment is longer than COMMENT_MAX_LENGTH
        """
        user = self._require_user()
        text = (text or "").strip()
        if not text:
            return None
        check = validate_text_content(text, "comment", max_length=COMMENT_MAX_LENGTH)
        if not check.is_valid:
            raise ValidationError(check.first_error, field="text", constraint=f"max_length={COMMENT_MAX_LENGTH}")
        self._post(post_id)

        async with self._command("add_comment", loading=False):
            result = await self.gateway.insert_comment(post_id, user.id, text)
            if not result.ok:
                return self._fail("add_comment", result.error, COMMENT_FAILED_TOAST)

            comment = result.value
            if comment.author_name in ("", UNKNOWN_COMMENTER):
                profile = self.store.profile
                author = profile.display_name if profile and profile.display_name else DEFAULT_COMMENT_AUTHOR
                comment = comment.model_copy(update={"author_name": author})

            post = self.store.get(EntityKind.SOCIAL_POSTS, post_id)
            if post is not None:
                self.store.upsert(EntityKind.SOCIAL_POSTS, post.with_comment(comment))
            return comment


__all__ = ["SocialHandlers"]
