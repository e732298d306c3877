"""Verification request endpoints for subjects."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, status

from huddle.api.v1.dependencies import CurrentProfileDep, StoreDep
from huddle.schemas.verification import VerificationRequestResponse, VerificationStatusResponse
from huddle.services.verification import VerificationWorkflow

router = APIRouter(prefix="/verification", tags=["verification"])


@router.post("/request", status_code=status.HTTP_201_CREATED)
async def submit_request(current_user: CurrentProfileDep, store: StoreDep) -> dict[str, Any]:
    """Open a verification request for the caller."""
    request = VerificationWorkflow(store).submit(current_user.id)
    return {
        "message": "Verification request submitted successfully",
        "request": VerificationRequestResponse.model_validate(request).model_dump(mode="json"),
    }


@router.get("/status", response_model=VerificationStatusResponse)
async def request_status(current_user: CurrentProfileDep, store: StoreDep) -> VerificationStatusResponse:
    """Return the caller's latest request or the ``none`` status."""
    return VerificationWorkflow(store).status(current_user.id)
