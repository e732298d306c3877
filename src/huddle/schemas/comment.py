"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .profile import AuthorSummary


class CommentCreate(BaseModel):
    """Schema for adding a comment to a post."""

    # May be absent; ``add_comment`` rejects missing or blank content.
    content: str | None = Field(None, max_length=2000, description="Comment text")


class CommentResponse(BaseModel):
    """Comment with its author projection."""

    id: str
    post_id: str
    user_id: str
    content: str
    created_at: datetime
    author: AuthorSummary | None = None

    model_config = ConfigDict(from_attributes=True)
