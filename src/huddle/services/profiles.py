"""Profile creation, updates and social-graph listings."""

from __future__ import annotations

import logging
from typing import Any

from huddle.core.errors import (
    ConflictError,
    NotFoundError,
    StoreConflictError,
    StoreError,
    ValidationFailedError,
)
from huddle.models import Profile
from huddle.repositories.store import RelationshipStore
from huddle.schemas.post import PostResponse, ProfilePage
from huddle.schemas.profile import ProfileResponse, ProfileView
from huddle.services.media import MediaStorage, MediaUpload, build_media_path

logger = logging.getLogger(__name__)

__all__ = ["ProfileService"]


class ProfileService:
    """Reads and writes profile records."""

    def __init__(self, store: RelationshipStore, media: MediaStorage | None = None) -> None:
        self.store = store
        self.media = media

    def create_profile(
        self,
        user_id: str,
        username: str | None,
        display_name: str | None = None,
    ) -> Profile:
        """Create the profile for a newly registered identity.

        Counters start at zero and the profile is unverified.
        """
        if not username or not username.strip():
            raise ValidationFailedError("Missing required fields")
        username = username.strip()
        if self.store.get_profile_by_username(username) is not None:
            raise ConflictError("Username already taken", reason="username_taken")
        try:
            return self.store.insert_profile(
                id=user_id,
                username=username,
                display_name=display_name or username,
                follower_count=0,
                following_count=0,
                is_verified=False,
            )
        except StoreConflictError as exc:
            raise ConflictError("Username already taken", reason="username_taken") from exc

    def _upload_image(self, user_id: str, namespace: str, prefix: str, upload: MediaUpload) -> str | None:
        if self.media is None:
            return None
        path = build_media_path(namespace, user_id, upload.extension, prefix=prefix)
        try:
            self.media.upload(path, upload, overwrite=True)
        except StoreError as exc:
            logger.warning(
                "Profile %s upload failed for %s: %s",
                prefix.rstrip("-"),
                user_id,
                exc.message,
                extra={"entity_id": user_id},
            )
            return None
        return self.media.public_url(path)

    def update_profile(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        bio: str | None = None,
        avatar: MediaUpload | None = None,
        cover: MediaUpload | None = None,
    ) -> Profile:
        """Apply a partial update; image upload failures are skipped."""
        updates: dict[str, Any] = {}
        if display_name:
            updates["display_name"] = display_name
        if bio is not None:
            updates["bio"] = bio
        if avatar is not None:
            url = self._upload_image(user_id, "avatars", "avatar-", avatar)
            if url:
                updates["avatar_url"] = url
        if cover is not None:
            url = self._upload_image(user_id, "covers", "cover-", cover)
            if url:
                updates["cover_url"] = url

        if not updates:
            raise ValidationFailedError("No updates provided")

        profile = self.store.update_profile(user_id, updates)
        if profile is None:
            raise NotFoundError("User not found")
        return profile

    def get_profile_view(self, viewer_id: str, username: str) -> ProfilePage:
        """Profile by username as seen by ``viewer_id``, with its posts."""
        profile = self.store.get_profile_by_username(username)
        if profile is None:
            raise NotFoundError("User not found")

        posts = self.store.list_posts_by_user(profile.id)
        view = ProfileView(
            **ProfileResponse.model_validate(profile).model_dump(),
            is_following=self.store.get_follow(viewer_id, profile.id) is not None,
            total_likes_received=self.store.sum_like_counts(profile.id),
        )
        return ProfilePage(
            profile=view,
            posts=[PostResponse.model_validate(post) for post in posts],
        )

    def list_followers(self, user_id: str) -> list[Profile]:
        return self.store.list_followers(user_id)

    def list_following(self, user_id: str) -> list[Profile]:
        return self.store.list_following(user_id)
