"""Hashtags and their links to posts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from huddle.db.session import Base
from huddle.db.time import utcnow


class Hashtag(Base):
    """Canonical (lower-cased, ``#``-prefixed) tag with a cached post count."""

    __tablename__ = "hashtags"
    __table_args__ = (
        CheckConstraint("post_count >= 0", name="ck_hashtags_post_count"),
        Index("ix_hashtags_post_count", "post_count"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    tag: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class PostHashtag(Base):
    """Join table mapping posts to hashtags; created once at post creation."""

    __tablename__ = "post_hashtags"
    __table_args__ = (Index("ix_post_hashtags_hashtag_id", "hashtag_id"),)

    post_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    hashtag_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("hashtags.id", ondelete="CASCADE"),
        primary_key=True,
    )
