"""SQLAlchemy models for posts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from huddle.db.session import Base
from huddle.db.time import utcnow

MEDIA_TYPE_IMAGE = "image"
MEDIA_TYPE_AUDIO = "audio"


def _new_id() -> str:
    return str(uuid.uuid4())


class Post(Base):
    """Primary content entity produced by users.

    Posts are listed newest first by ``created_at``. Deleting a post cascades
    to its likes, comments and hashtag links.
    """

    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("like_count >= 0", name="ck_posts_like_count"),
        CheckConstraint("comment_count >= 0", name="ck_posts_comment_count"),
        CheckConstraint(
            "media_type IS NULL OR media_type IN ('image', 'audio')",
            name="ck_posts_media_type",
        ),
        Index("ix_posts_created_at", "created_at"),
        Index("ix_posts_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    # May be empty when media is attached.
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    media_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    media_type: Mapped[str | None] = mapped_column(String(16), nullable=True)

    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    author = relationship("Profile", lazy="joined", innerjoin=True)
