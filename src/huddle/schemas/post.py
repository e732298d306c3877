"""Post-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .profile import AuthorSummary, ProfileView


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    user_id: str
    content: str
    media_url: str | None = None
    media_type: Literal["image", "audio"] | None = None
    like_count: int
    comment_count: int
    created_at: datetime
    author: AuthorSummary | None = None

    model_config = ConfigDict(from_attributes=True)


class PostView(PostResponse):
    """Post enriched with the requesting viewer's like state."""

    is_liked: bool


class FeedPage(BaseModel):
    """One page of the news feed."""

    posts: list[PostView]
    page: int
    page_size: int


class LikeResult(BaseModel):
    """Outcome of a like toggle."""

    message: str
    is_liked: bool


class ProfilePage(BaseModel):
    """Profile view with the profile's posts, newest first."""

    profile: ProfileView
    posts: list[PostResponse]
