"""Profile-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AuthorSummary(BaseModel):
    """Public projection of a profile embedded in posts and comments."""

    id: str
    username: str
    display_name: str
    avatar_url: str | None = None
    is_verified: bool = False

    model_config = ConfigDict(from_attributes=True)


class SubjectSummary(AuthorSummary):
    """Author projection plus follower count, used in admin listings."""

    follower_count: int = 0


class ProfileCreate(BaseModel):
    """Schema for creating a profile right after identity signup."""

    username: str = Field(..., min_length=1, max_length=64, description="Unique handle")
    display_name: str | None = Field(None, max_length=100, description="Defaults to username")


class ProfileResponse(BaseModel):
    """Full profile record."""

    id: str
    username: str
    display_name: str
    avatar_url: str | None = None
    cover_url: str | None = None
    bio: str | None = None
    follower_count: int
    following_count: int
    is_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminProfileResponse(ProfileResponse):
    """Profile record with moderation flags for admin listings."""

    is_admin: bool
    is_banned: bool
    ban_reason: str | None = None


class ProfileView(ProfileResponse):
    """Profile as seen by a specific viewer."""

    is_following: bool = Field(..., description="Whether the viewer follows this profile")
    total_likes_received: int = Field(..., description="Sum of like counts over the profile's posts")


class BanRequest(BaseModel):
    """Admin request to ban a profile."""

    reason: str | None = Field(None, max_length=500)

