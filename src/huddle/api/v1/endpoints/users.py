"""Profile and follow endpoints."""

from __future__ import annotations

from fastapi import APIRouter, File, Form, UploadFile, status

from huddle.api.v1.dependencies import (
    CurrentProfileDep,
    CurrentUserIdDep,
    MediaDep,
    StoreDep,
    read_upload,
)
from huddle.models import Profile
from huddle.schemas.post import ProfilePage
from huddle.schemas.profile import AuthorSummary, ProfileCreate, ProfileResponse
from huddle.services.counters import CounterReconciliationEngine
from huddle.services.profiles import ProfileService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    payload: ProfileCreate,
    user_id: CurrentUserIdDep,
    store: StoreDep,
) -> Profile:
    """Create the caller's profile after identity signup."""
    return ProfileService(store).create_profile(user_id, payload.username, payload.display_name)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    current_user: CurrentProfileDep,
    store: StoreDep,
    media_storage: MediaDep,
    display_name: str | None = Form(None),
    bio: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    cover: UploadFile | None = File(None),
) -> Profile:
    """Update display name, bio, avatar or cover image."""
    return ProfileService(store, media_storage).update_profile(
        current_user.id,
        display_name=display_name,
        bio=bio,
        avatar=await read_upload(avatar),
        cover=await read_upload(cover),
    )


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_user: CurrentProfileDep) -> Profile:
    """Return the caller's own profile."""
    return current_user


@router.get("/{username}", response_model=ProfilePage)
async def get_profile(username: str, current_user: CurrentProfileDep, store: StoreDep) -> ProfilePage:
    """Return a profile with its posts and the caller's follow state."""
    return ProfileService(store).get_profile_view(current_user.id, username)


@router.post("/{user_id}/follow")
async def follow_user(user_id: str, current_user: CurrentProfileDep, store: StoreDep) -> dict[str, str]:
    CounterReconciliationEngine(store).follow(current_user.id, user_id)
    return {"message": "User followed successfully"}


@router.delete("/{user_id}/follow")
async def unfollow_user(
    user_id: str,
    current_user: CurrentProfileDep,
    store: StoreDep,
) -> dict[str, str]:
    CounterReconciliationEngine(store).unfollow(current_user.id, user_id)
    return {"message": "User unfollowed successfully"}


@router.get("/{user_id}/followers", response_model=list[AuthorSummary])
async def list_followers(user_id: str, current_user: CurrentProfileDep, store: StoreDep) -> list[Profile]:
    return ProfileService(store).list_followers(user_id)


@router.get("/{user_id}/following", response_model=list[AuthorSummary])
async def list_following(user_id: str, current_user: CurrentProfileDep, store: StoreDep) -> list[Profile]:
    return ProfileService(store).list_following(user_id)
