"""Search and hashtag discovery endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from huddle.api.v1.dependencies import CurrentProfileDep, StoreDep
from huddle.models import Hashtag
from huddle.schemas.hashtag import HashtagPostsResponse, HashtagResponse, SearchResults
from huddle.services.feed import FeedAssembler
from huddle.services.search import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/", response_model=SearchResults)
async def search(
    current_user: CurrentProfileDep,
    store: StoreDep,
    q: str | None = Query(None, description="Search term"),
    type: str = Query("all", description="all, users, posts or hashtags"),
) -> SearchResults:
    """Search users, posts and hashtags case-insensitively."""
    return SearchService(store).search(q, type)


@router.get("/trending", response_model=list[HashtagResponse])
async def trending(current_user: CurrentProfileDep, store: StoreDep) -> list[Hashtag]:
    """Return the hashtags with the most posts."""
    return SearchService(store).trending()


@router.get("/hashtag/{tag}", response_model=HashtagPostsResponse)
async def hashtag_posts(tag: str, current_user: CurrentProfileDep, store: StoreDep) -> HashtagPostsResponse:
    """Return a hashtag and its posts; the leading ``#`` is optional."""
    return FeedAssembler(store).get_hashtag_posts(current_user.id, tag)
