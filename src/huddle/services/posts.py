"""Service-level helpers for creating and deleting posts."""

from __future__ import annotations

import logging

from huddle.core.errors import (
    ForbiddenError,
    NotFoundError,
    StoreError,
    ValidationFailedError,
)
from huddle.models import Post
from huddle.repositories.store import RelationshipStore
from huddle.services.hashtags import HashtagIndexer
from huddle.services.media import (
    MediaStorage,
    MediaUpload,
    build_media_path,
    media_path_from_url,
    media_type_for,
)

logger = logging.getLogger(__name__)

__all__ = ["PostService"]


class PostService:
    """Creates posts (with media and hashtags) and deletes them."""

    def __init__(self, store: RelationshipStore, media: MediaStorage) -> None:
        self.store = store
        self.media = media
        self.indexer = HashtagIndexer(store)

    def create_post(
        self,
        author_id: str,
        content: str | None,
        media: MediaUpload | None = None,
    ) -> Post:
        """Persist a post, then index its hashtags.

        Args:
            author_id: Profile id of the author.
            content: Post text; may be empty when media is attached.
            media: Optional image or audio upload.

        Returns:
            The committed post with its author loaded.

        Raises:
            ValidationFailedError: If neither content nor media is supplied.
            StoreError: If the media upload or the post insert fails.

        Notes:
            Hashtag indexing is best effort and never fails the call.
        """
        if not content and media is None:
            raise ValidationFailedError("Post must have content or media")

        media_url: str | None = None
        media_type: str | None = None
        if media is not None:
            media_type = media_type_for(media.content_type)
            path = build_media_path("posts", author_id, media.extension)
            self.media.upload(path, media, overwrite=False)
            media_url = self.media.public_url(path)

        post = self.store.insert_post(
            user_id=author_id,
            content=content or "",
            media_url=media_url,
            media_type=media_type,
            like_count=0,
            comment_count=0,
        )
        self.indexer.index_post(post.id, content)
        return post

    def delete_post(self, actor_id: str, post_id: str, *, as_admin: bool = False) -> None:
        """Delete a post owned by ``actor_id`` (or any post when ``as_admin``).

        Likes, comments and hashtag links go with it. Hashtag ``post_count``
        is not decremented.
        """
        post = self.store.get_post(post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if not as_admin and post.user_id != actor_id:
            raise ForbiddenError("Not authorized")

        if post.media_url:
            path = media_path_from_url(post.media_url)
            try:
                self.media.remove([path])
            except StoreError as exc:
                logger.warning(
                    "Could not remove media %s for post %s: %s",
                    path,
                    post_id,
                    exc.message,
                    extra={"post_id": post_id},
                )

        if not self.store.delete_post(post_id):
            raise NotFoundError("Post not found")
