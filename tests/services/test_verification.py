"""Tests for the verification workflow state machine."""

from unittest.mock import patch

import pytest

from huddle.core.errors import ConflictError, NotFoundError, StoreError, ValidationFailedError
from huddle.db.time import utcnow
from huddle.repositories.store import RelationshipStore
from huddle.services.verification import VerificationWorkflow


@pytest.fixture()
def workflow(store) -> VerificationWorkflow:
    return VerificationWorkflow(store)


def test_status_without_request_is_none(workflow, test_user) -> None:
    status = workflow.status(test_user.id)

    assert status.status == "none"
    assert status.request is None


def test_submit_creates_pending_request(workflow, test_user) -> None:
    request = workflow.submit(test_user.id)

    assert request.status == "pending"
    assert request.reviewed_at is None
    assert workflow.status(test_user.id).status == "pending"


def test_second_submit_while_pending_conflicts(workflow, test_user) -> None:
    workflow.submit(test_user.id)

    with pytest.raises(ConflictError) as excinfo:
        workflow.submit(test_user.id)

    assert excinfo.value.reason == "already_pending"


def test_approve_marks_profile_verified(workflow, store, test_user) -> None:
    request = workflow.submit(test_user.id)

    approved = workflow.approve(request.id)

    store.session.expire_all()
    assert approved.status == "approved"
    assert approved.reviewed_at is not None
    assert store.get_profile(test_user.id).is_verified is True


def test_submit_after_approval_conflicts(workflow, test_user) -> None:
    workflow.approve(workflow.submit(test_user.id).id)

    with pytest.raises(ConflictError) as excinfo:
        workflow.submit(test_user.id)

    assert excinfo.value.reason == "already_verified"


def test_reject_allows_resubmission(workflow, store, test_user) -> None:
    rejected = workflow.reject(workflow.submit(test_user.id).id)

    assert rejected.status == "rejected"
    assert store.get_profile(test_user.id).is_verified is False
    assert workflow.status(test_user.id).status == "rejected"

    again = workflow.submit(test_user.id)
    assert again.status == "pending"


def test_decided_request_cannot_be_decided_again(workflow, test_user) -> None:
    request = workflow.submit(test_user.id)
    workflow.reject(request.id)

    with pytest.raises(ConflictError) as excinfo:
        workflow.approve(request.id)

    assert excinfo.value.reason == "already_processed"


def test_decide_unknown_request(workflow) -> None:
    with pytest.raises(NotFoundError):
        workflow.reject("missing")


def test_approval_profile_failure_is_logged_and_raised(workflow, store, test_user, caplog) -> None:
    request = workflow.submit(test_user.id)

    with patch.object(store, "update_profile", side_effect=StoreError("profile write failed")):
        with pytest.raises(StoreError):
            workflow.approve(request.id)

    assert store.get_verification_request(request.id).status == "approved"
    assert "was not flagged verified" in caplog.text


def test_list_requests_filters_by_status(workflow, test_user, other_user) -> None:
    pending = workflow.submit(test_user.id)
    rejected = workflow.reject(workflow.submit(other_user.id).id)

    assert [r.id for r in workflow.list_requests()] == [pending.id]
    assert [r.id for r in workflow.list_requests("rejected")] == [rejected.id]
    assert {r.id for r in workflow.list_requests("all")} == {pending.id, rejected.id}


def test_list_requests_rejects_unknown_filter(workflow) -> None:
    with pytest.raises(ValidationFailedError):
        workflow.list_requests("archived")


def test_concurrent_decisions_settle_on_the_first(session_factory, test_user) -> None:
    first_session = session_factory()
    second_session = session_factory()
    try:
        first = RelationshipStore(first_session)
        second = RelationshipStore(second_session)
        request = VerificationWorkflow(first).submit(test_user.id)
        # The second reviewer has already loaded the request as pending.
        assert second.get_verification_request(request.id).status == "pending"

        VerificationWorkflow(first).approve(request.id)

        with pytest.raises(ConflictError) as excinfo:
            VerificationWorkflow(second).reject(request.id)

        assert excinfo.value.reason == "already_processed"
        first_session.expire_all()
        assert first.get_verification_request(request.id).status == "approved"
        assert first.get_profile(test_user.id).is_verified is True
    finally:
        first_session.close()
        second_session.close()


def test_conditional_update_skips_decided_request(store, test_user) -> None:
    request = store.insert_verification_request(test_user.id, "rejected")

    result = store.update_verification_request(
        request.id,
        status="approved",
        reviewed_at=utcnow(),
        expected_status="pending",
    )

    assert result is None
    assert store.get_verification_request(request.id).status == "rejected"
