"""Hashtag and search schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from .post import PostResponse, PostView
from .profile import AuthorSummary


class HashtagResponse(BaseModel):
    """Canonical hashtag with its cached post count."""

    id: str
    tag: str
    post_count: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HashtagPostsResponse(BaseModel):
    """A hashtag together with the posts linked to it."""

    hashtag: HashtagResponse
    posts: list[PostView]


class UserSearchHit(AuthorSummary):
    """User search result."""

    follower_count: int = 0


class SearchResults(BaseModel):
    """Combined search results; sections not requested stay empty."""

    users: list[UserSearchHit] = []
    posts: list[PostResponse] = []
    hashtags: list[HashtagResponse] = []
