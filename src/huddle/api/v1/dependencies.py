"""Shared API dependencies for authentication and service wiring."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from huddle.core.errors import UnauthorizedError
from huddle.core.security import resolve_subject
from huddle.db.session import get_db
from huddle.models import Profile
from huddle.repositories.store import RelationshipStore
from huddle.services.admin import AdminService
from huddle.services.media import MediaStorage, MediaUpload, get_media_storage

# Missing credentials are reported through UnauthorizedError, not FastAPI's 403.
bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[Session, Depends(get_db)]


def get_store(db: SessionDep) -> RelationshipStore:
    """Return a store bound to the request's session."""
    return RelationshipStore(db)


def get_media_storage_dep() -> MediaStorage:
    """Return the shared media storage."""
    return get_media_storage()


StoreDep = Annotated[RelationshipStore, Depends(get_store)]
MediaDep = Annotated[MediaStorage, Depends(get_media_storage_dep)]


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Resolve the bearer credential to the caller's subject id."""
    return resolve_subject(credentials.credentials if credentials else None)


CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]


def get_current_profile(user_id: CurrentUserIdDep, store: StoreDep) -> Profile:
    """Return the caller's profile; callers without one are not authenticated."""
    profile = store.get_profile(user_id)
    if profile is None:
        raise UnauthorizedError("User not found")
    return profile


CurrentProfileDep = Annotated[Profile, Depends(get_current_profile)]


def get_admin_profile(user_id: CurrentUserIdDep, store: StoreDep) -> Profile:
    """Return the caller's profile if it carries admin rights."""
    return AdminService(store).require_admin(user_id)


AdminProfileDep = Annotated[Profile, Depends(get_admin_profile)]


async def read_upload(upload: UploadFile | None) -> MediaUpload | None:
    """Buffer an uploaded file in memory; empty parts count as absent."""
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    return MediaUpload(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )
