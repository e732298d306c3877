"""Verification request workflow.

States: ``none`` (no request) -> ``pending`` -> ``approved`` | ``rejected``.
A subject may hold at most one request that is pending or approved.
"""

from __future__ import annotations

import logging

from huddle.core.errors import (
    ConflictError,
    NotFoundError,
    StoreConflictError,
    StoreError,
    ValidationFailedError,
)
from huddle.db.time import utcnow
from huddle.models import VerificationRequest, VerificationState
from huddle.repositories.store import RelationshipStore
from huddle.schemas.verification import (
    VerificationRequestResponse,
    VerificationStatusResponse,
)

logger = logging.getLogger(__name__)

__all__ = ["VerificationWorkflow", "LISTING_FILTERS"]

LISTING_FILTERS = ("pending", "approved", "rejected", "all")


class VerificationWorkflow:
    """Drives verification requests through their state machine."""

    def __init__(self, store: RelationshipStore) -> None:
        self.store = store

    def submit(self, user_id: str) -> VerificationRequest:
        """Open a pending request for ``user_id``.

        Raises:
            ConflictError: ``already_verified`` if an approved request exists,
                ``already_pending`` if a pending one does.
        """
        existing = self.store.find_active_verification_request(user_id)
        if existing is not None:
            if existing.status == VerificationState.APPROVED.value:
                raise ConflictError("Account already verified", reason="already_verified")
            raise ConflictError("Verification request already pending", reason="already_pending")

        try:
            return self.store.insert_verification_request(
                user_id, VerificationState.PENDING.value
            )
        except StoreConflictError as exc:
            # The partial unique index caught a concurrent submission.
            raise ConflictError(
                "Verification request already pending", reason="already_pending"
            ) from exc

    def status(self, user_id: str) -> VerificationStatusResponse:
        """Return the subject's most recent request, or the ``none`` status."""
        request = self.store.latest_verification_request(user_id)
        if request is None:
            return VerificationStatusResponse(status=VerificationState.NONE.value)
        return VerificationStatusResponse(
            status=request.status,
            request=VerificationRequestResponse.model_validate(request),
        )

    def _decide(self, request_id: str, outcome: VerificationState) -> VerificationRequest:
        request = self.store.get_verification_request(request_id)
        if request is None:
            raise NotFoundError("Request not found")
        if request.status != VerificationState.PENDING.value:
            raise ConflictError("Request already processed", reason="already_processed")

        decided = self.store.update_verification_request(
            request_id,
            status=outcome.value,
            reviewed_at=utcnow(),
            expected_status=VerificationState.PENDING.value,
        )
        if decided is None:
            # Another reviewer decided or removed it after our read.
            if self.store.get_verification_request(request_id) is None:
                raise NotFoundError("Request not found")
            raise ConflictError("Request already processed", reason="already_processed")
        return decided

    def approve(self, request_id: str) -> VerificationRequest:
        """Approve a pending request and mark the subject verified.

        The status update and the profile flag are two separate writes. If the
        second one fails the request stays approved with an unverified
        profile; the failure is logged and re-raised.
        """
        request = self._decide(request_id, VerificationState.APPROVED)
        try:
            self.store.update_profile(request.user_id, {"is_verified": True})
        except StoreError:
            logger.error(
                "Verification %s approved but profile %s was not flagged verified",
                request.id,
                request.user_id,
                extra={"entity": "profiles", "entity_id": request.user_id},
            )
            raise
        return request

    def reject(self, request_id: str) -> VerificationRequest:
        """Reject a pending request."""
        return self._decide(request_id, VerificationState.REJECTED)

    def list_requests(self, status: str = "pending") -> list[VerificationRequest]:
        """Requests newest first; ``status="all"`` disables the filter."""
        if status not in LISTING_FILTERS:
            raise ValidationFailedError(f"Unknown status filter: {status}")
        return self.store.list_verification_requests(None if status == "all" else status)
