"""Feed assembly with per-viewer like state."""

from __future__ import annotations

from collections.abc import Sequence

from huddle.core.errors import NotFoundError, ValidationFailedError
from huddle.core.settings import settings
from huddle.models import Post
from huddle.repositories.store import RelationshipStore
from huddle.schemas.hashtag import HashtagPostsResponse, HashtagResponse
from huddle.schemas.post import FeedPage, PostResponse, PostView
from huddle.services.hashtags import canonical_tag

__all__ = ["FeedAssembler"]


class FeedAssembler:
    """Builds pages of posts enriched with author and ``is_liked``.

    Paging is offset based: posts created between two page requests can shift
    rows across page boundaries, so a client may see a post twice or miss one.
    """

    def __init__(
        self,
        store: RelationshipStore,
        *,
        batch_like_lookup: bool | None = None,
        max_page_size: int | None = None,
    ) -> None:
        self.store = store
        self.batch_like_lookup = (
            settings.feed_batch_like_lookup if batch_like_lookup is None else batch_like_lookup
        )
        self.max_page_size = max_page_size or settings.feed_max_page_size

    def get_feed(self, viewer_id: str, page: int = 1, page_size: int | None = None) -> FeedPage:
        """Return page ``page`` of all posts, newest first.

        Raises:
            ValidationFailedError: If ``page`` < 1 or ``page_size`` is outside
                ``1..max_page_size``.
        """
        if page_size is None:
            page_size = settings.feed_default_page_size
        if page < 1:
            raise ValidationFailedError("Page must be at least 1")
        if not 1 <= page_size <= self.max_page_size:
            raise ValidationFailedError(f"Page size must be between 1 and {self.max_page_size}")

        posts = self.store.list_posts(offset=(page - 1) * page_size, limit=page_size)
        return FeedPage(posts=self.enrich(viewer_id, posts), page=page, page_size=page_size)

    def get_post(self, viewer_id: str, post_id: str) -> PostView:
        post = self.store.get_post(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return self.enrich(viewer_id, [post])[0]

    def get_hashtag_posts(self, viewer_id: str, tag: str) -> HashtagPostsResponse:
        """Return a hashtag and its posts; ``tag`` may omit the ``#``."""
        hashtag = self.store.get_hashtag_by_tag(canonical_tag(tag))
        if hashtag is None:
            raise NotFoundError("Hashtag not found")
        posts = self.store.list_hashtag_posts(hashtag.id)
        return HashtagPostsResponse(
            hashtag=HashtagResponse.model_validate(hashtag),
            posts=self.enrich(viewer_id, posts),
        )

    def enrich(self, viewer_id: str, posts: Sequence[Post]) -> list[PostView]:
        """Attach the viewer's like state to each post, preserving order."""
        if self.batch_like_lookup:
            liked = self.store.liked_post_ids(viewer_id, [post.id for post in posts])
        else:
            liked = {
                post.id for post in posts if self.store.get_like(post.id, viewer_id) is not None
            }

        views: list[PostView] = []
        for post in posts:
            base = PostResponse.model_validate(post)
            views.append(PostView(**base.model_dump(), is_liked=post.id in liked))
        return views
