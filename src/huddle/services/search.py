"""Read-only search over profiles, posts and hashtags."""

from __future__ import annotations

from huddle.core.errors import ValidationFailedError
from huddle.core.settings import settings
from huddle.models import Hashtag
from huddle.repositories.store import RelationshipStore
from huddle.schemas.hashtag import HashtagResponse, SearchResults, UserSearchHit
from huddle.schemas.post import PostResponse

__all__ = ["SEARCH_TYPES", "SearchService"]

SEARCH_TYPES = ("all", "users", "posts", "hashtags")


class SearchService:
    """Case-insensitive substring search and trending tags."""

    def __init__(self, store: RelationshipStore) -> None:
        self.store = store

    def search(self, query: str | None, search_type: str = "all") -> SearchResults:
        if not query or not query.strip():
            raise ValidationFailedError("Search query required")
        if search_type not in SEARCH_TYPES:
            raise ValidationFailedError(f"Unknown search type: {search_type}")

        term = query.strip().lower()
        results = SearchResults()

        if search_type in ("all", "users"):
            results.users = [
                UserSearchHit.model_validate(profile)
                for profile in self.store.search_profiles(term, settings.search_user_limit)
            ]
        if search_type in ("all", "posts"):
            results.posts = [
                PostResponse.model_validate(post)
                for post in self.store.search_posts(term, settings.search_post_limit)
            ]
        if search_type in ("all", "hashtags"):
            tag_term = term if term.startswith("#") else f"#{term}"
            results.hashtags = [
                HashtagResponse.model_validate(tag)
                for tag in self.store.search_hashtags(tag_term, settings.search_hashtag_limit)
            ]
        return results

    def trending(self, limit: int | None = None) -> list[Hashtag]:
        """Hashtags with the highest post counts."""
        return self.store.top_hashtags(limit or settings.trending_limit)
