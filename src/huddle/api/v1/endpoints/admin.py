"""Moderator endpoints; every route requires an admin profile."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from huddle.api.v1.dependencies import (
    AdminProfileDep,
    MediaDep,
    StoreDep,
    get_admin_profile,
)
from huddle.models import Post, Profile, VerificationRequest
from huddle.schemas.post import PostResponse
from huddle.schemas.profile import AdminProfileResponse, BanRequest
from huddle.schemas.verification import AdminStats, VerificationRequestDetail
from huddle.services.admin import AdminService
from huddle.services.counters import CounterReconciliationEngine
from huddle.services.posts import PostService
from huddle.services.verification import VerificationWorkflow

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(get_admin_profile)],
)


@router.get("/stats", response_model=AdminStats)
async def get_stats(store: StoreDep) -> AdminStats:
    return AdminService(store).stats()


@router.get("/verification-requests", response_model=list[VerificationRequestDetail])
async def list_verification_requests(
    store: StoreDep,
    status: str = Query("pending", description="pending, approved, rejected or all"),
) -> list[VerificationRequest]:
    return VerificationWorkflow(store).list_requests(status)


@router.post("/verification-requests/{request_id}/approve")
async def approve_request(request_id: str, store: StoreDep) -> dict[str, str]:
    VerificationWorkflow(store).approve(request_id)
    return {"message": "Verification request approved"}


@router.post("/verification-requests/{request_id}/reject")
async def reject_request(request_id: str, store: StoreDep) -> dict[str, str]:
    VerificationWorkflow(store).reject(request_id)
    return {"message": "Verification request rejected"}


@router.get("/posts", response_model=list[PostResponse])
async def list_posts(
    store: StoreDep,
    page: int = Query(1),
    limit: int = Query(20),
) -> list[Post]:
    return AdminService(store).list_posts(page, limit)


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: str,
    admin: AdminProfileDep,
    store: StoreDep,
    media_storage: MediaDep,
) -> dict[str, str]:
    PostService(store, media_storage).delete_post(admin.id, post_id, as_admin=True)
    return {"message": "Post deleted successfully"}


@router.get("/users", response_model=list[AdminProfileResponse])
async def list_users(
    store: StoreDep,
    page: int = Query(1),
    limit: int = Query(20),
    search: str | None = Query(None),
) -> list[Profile]:
    return AdminService(store).list_users(page, limit, search)


@router.post("/users/{user_id}/ban")
async def ban_user(user_id: str, payload: BanRequest, store: StoreDep) -> dict[str, str]:
    AdminService(store).ban_user(user_id, payload.reason)
    return {"message": "User banned successfully"}


@router.delete("/comments/{comment_id}")
async def delete_comment(comment_id: str, store: StoreDep) -> dict[str, str]:
    """Remove a comment; the post's comment count is left as is."""
    CounterReconciliationEngine(store).delete_comment(comment_id)
    return {"message": "Comment deleted successfully"}
