"""Moderator operations: access guard, statistics, user management."""

from __future__ import annotations

from huddle.core.errors import ForbiddenError, NotFoundError, ValidationFailedError
from huddle.core.settings import settings
from huddle.models import Post, Profile, VerificationState
from huddle.repositories.store import RelationshipStore
from huddle.schemas.verification import AdminStats

__all__ = ["AdminService"]


class AdminService:
    """Operations reserved for profiles flagged ``is_admin``."""

    def __init__(self, store: RelationshipStore) -> None:
        self.store = store

    def require_admin(self, user_id: str) -> Profile:
        profile = self.store.get_profile(user_id)
        if profile is None or not profile.is_admin:
            raise ForbiddenError("Admin access required")
        return profile

    def stats(self) -> AdminStats:
        return AdminStats(
            total_users=self.store.count_profiles(),
            total_posts=self.store.count_posts(),
            total_hashtags=self.store.count_hashtags(),
            verified_accounts=self.store.count_profiles(verified=True),
            pending_verification_requests=self.store.count_verification_requests(
                VerificationState.PENDING.value
            ),
        )

    @staticmethod
    def _window(page: int, page_size: int | None) -> tuple[int, int]:
        size = page_size or settings.feed_default_page_size
        if page < 1 or not 1 <= size <= settings.feed_max_page_size:
            raise ValidationFailedError("Invalid pagination parameters")
        return (page - 1) * size, size

    def list_users(
        self,
        page: int = 1,
        page_size: int | None = None,
        search: str | None = None,
    ) -> list[Profile]:
        offset, limit = self._window(page, page_size)
        return self.store.list_profiles(offset=offset, limit=limit, search=search or None)

    def list_posts(self, page: int = 1, page_size: int | None = None) -> list[Post]:
        offset, limit = self._window(page, page_size)
        return self.store.list_posts(offset=offset, limit=limit)

    def ban_user(self, user_id: str, reason: str | None = None) -> Profile:
        profile = self.store.update_profile(user_id, {"is_banned": True, "ban_reason": reason})
        if profile is None:
            raise NotFoundError("User not found")
        return profile
