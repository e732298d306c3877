"""Verification workflow and admin schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from .profile import SubjectSummary


class VerificationRequestResponse(BaseModel):
    """A stored verification request."""

    id: str
    user_id: str
    status: Literal["pending", "approved", "rejected"]
    created_at: datetime
    reviewed_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class VerificationRequestDetail(VerificationRequestResponse):
    """Verification request with the subject's projection, for reviewers."""

    subject: SubjectSummary


class VerificationStatusResponse(BaseModel):
    """Current verification state of a subject.

    ``status`` is ``none`` and ``request`` is empty when the subject never
    submitted a request.
    """

    status: Literal["none", "pending", "approved", "rejected"]
    request: VerificationRequestResponse | None = None


class AdminStats(BaseModel):
    """Dashboard counters."""

    total_users: int
    total_posts: int
    total_hashtags: int
    verified_accounts: int
    pending_verification_requests: int
