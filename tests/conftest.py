# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from datetime import datetime, timedelta, timezone
from itertools import count
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from huddle.api.v1.dependencies import get_media_storage_dep
from huddle.core.security import create_access_token
from huddle.db.session import Base, enable_sqlite_foreign_keys
from huddle.db.session import get_db as app_get_session
from huddle.main import app as fastapi_app
from huddle.models import Post, Profile
from huddle.repositories.store import RelationshipStore
from huddle.services.media import LocalMediaStorage

TEST_DB_URL = "sqlite://"
BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

_PROFILE_COUNTER = count(1)
_POST_CLOCK = count(1)


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Session used by fixtures and services; the store commits through it."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db_session: Session) -> RelationshipStore:
    return RelationshipStore(db_session)


@pytest.fixture()
def media_storage(tmp_path: Path) -> LocalMediaStorage:
    return LocalMediaStorage(root=tmp_path, base_url="http://test/storage", bucket="media")


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    session_factory: sessionmaker[Session],
    media_storage: LocalMediaStorage,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_media_storage_dep] = lambda: media_storage
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_media_storage_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def make_profile(db_session: Session) -> Callable[..., Profile]:
    """Return a factory persisting profiles with unique usernames."""

    def _make(username: str | None = None, **fields) -> Profile:
        number = next(_PROFILE_COUNTER)
        username = username or f"user{number}"
        profile = Profile(
            id=fields.pop("id", f"subject-{number}"),
            username=username,
            display_name=fields.pop("display_name", username.title()),
            **fields,
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Return a factory persisting posts with strictly increasing timestamps."""

    def _make(author: Profile, content: str = "Test post content", **fields) -> Post:
        created_at = fields.pop(
            "created_at",
            BASE_TIME + timedelta(minutes=next(_POST_CLOCK)),
        )
        post = Post(user_id=author.id, content=content, created_at=created_at, **fields)
        db_session.add(post)
        db_session.commit()
        db_session.refresh(post)
        return post

    return _make


@pytest.fixture()
def test_user(make_profile: Callable[..., Profile]) -> Profile:
    """Create and return the primary test profile."""
    return make_profile("alice", display_name="Alice")


@pytest.fixture()
def other_user(make_profile: Callable[..., Profile]) -> Profile:
    """Create and return a second profile."""
    return make_profile("bob", display_name="Bob")


@pytest.fixture()
def admin_user(make_profile: Callable[..., Profile]) -> Profile:
    return make_profile("moderator", is_admin=True)


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_user: Profile) -> Post:
    """Create a baseline post authored by ``test_user``."""
    return make_post(test_user)


def auth_headers(subject_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject_id)}"}


@pytest.fixture()
def headers_for() -> Callable[[Profile], dict[str, str]]:
    """Return a helper building bearer headers for any profile."""
    return lambda profile: auth_headers(profile.id)


@pytest.fixture()
def auth_token(test_user: Profile) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user.id)


@pytest.fixture()
def other_auth_token(other_user: Profile) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user.id)


@pytest.fixture()
def admin_token(admin_user: Profile) -> dict[str, str]:
    return auth_headers(admin_user.id)
