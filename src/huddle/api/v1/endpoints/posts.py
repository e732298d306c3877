"""Post, feed, like and comment endpoints."""

from __future__ import annotations

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from huddle.api.v1.dependencies import (
    CurrentProfileDep,
    MediaDep,
    StoreDep,
    read_upload,
)
from huddle.core.settings import settings
from huddle.models import Comment, Post
from huddle.schemas.comment import CommentCreate, CommentResponse
from huddle.schemas.post import FeedPage, LikeResult, PostResponse, PostView
from huddle.services.counters import CounterReconciliationEngine
from huddle.services.feed import FeedAssembler
from huddle.services.posts import PostService

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/feed", response_model=FeedPage)
async def get_feed(
    current_user: CurrentProfileDep,
    store: StoreDep,
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(settings.feed_default_page_size, description="Posts per page"),
) -> FeedPage:
    """Return all posts newest first with the caller's like state."""
    return FeedAssembler(store).get_feed(current_user.id, page=page, page_size=limit)


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    current_user: CurrentProfileDep,
    store: StoreDep,
    media_storage: MediaDep,
    content: str | None = Form(None),
    media: UploadFile | None = File(None),
) -> Post:
    """Create a post from text and/or an image or audio file."""
    upload = await read_upload(media)
    return PostService(store, media_storage).create_post(current_user.id, content, upload)


@router.get("/{post_id}", response_model=PostView)
async def get_post(post_id: str, current_user: CurrentProfileDep, store: StoreDep) -> PostView:
    """Return one post with the caller's like state."""
    return FeedAssembler(store).get_post(current_user.id, post_id)


@router.post("/{post_id}/like", response_model=LikeResult)
async def toggle_like(post_id: str, current_user: CurrentProfileDep, store: StoreDep) -> LikeResult:
    """Like the post, or remove the caller's existing like."""
    result = CounterReconciliationEngine(store).toggle_like(current_user.id, post_id)
    return LikeResult(
        message="Post liked" if result.active else "Post unliked",
        is_liked=result.active,
    )


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    post_id: str,
    current_user: CurrentProfileDep,
    store: StoreDep,
) -> list[Comment]:
    """Return comments on a post, newest first."""
    return CounterReconciliationEngine(store).list_comments(post_id)


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str,
    payload: CommentCreate,
    current_user: CurrentProfileDep,
    store: StoreDep,
) -> Comment:
    """Add a comment and bump the post's comment count."""
    return CounterReconciliationEngine(store).add_comment(current_user.id, post_id, payload.content)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    current_user: CurrentProfileDep,
    store: StoreDep,
    media_storage: MediaDep,
) -> dict[str, str]:
    """Delete one of the caller's own posts."""
    PostService(store, media_storage).delete_post(current_user.id, post_id)
    return {"message": "Post deleted successfully"}
