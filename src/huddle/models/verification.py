"""Models capturing verification requests and their review state."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from huddle.db.session import Base
from huddle.db.time import utcnow


class VerificationState(str, enum.Enum):
    """Lifecycle of a verification request.

    ``NONE`` is never stored; it is the status reported when a subject has no
    request at all.
    """

    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


ACTIVE_STATES = (VerificationState.PENDING.value, VerificationState.APPROVED.value)
_ACTIVE_PREDICATE = text("status IN ('pending', 'approved')")


class VerificationRequest(Base):
    """A subject's request to receive the verified badge.

    At most one request per subject may be pending or approved; the partial
    unique index enforces this at the store.
    """

    __tablename__ = "verification_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_verification_requests_status",
        ),
        Index(
            "uq_verification_requests_active_user",
            "user_id",
            unique=True,
            sqlite_where=_ACTIVE_PREDICATE,
            postgresql_where=_ACTIVE_PREDICATE,
        ),
        Index("ix_verification_requests_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=VerificationState.PENDING.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    # Set only when the request leaves ``pending``.
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    subject = relationship("Profile", lazy="joined", innerjoin=True)
