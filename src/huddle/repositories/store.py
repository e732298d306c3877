"""Data access for the social graph relations.

``RelationshipStore`` is the only component that talks to SQLAlchemy. Every
write commits on its own so that callers observe the same one-call-one-commit
behaviour a managed backend offers, and every failure is surfaced as a
``StoreError`` (``StoreConflictError`` for constraint violations) after the
session has been rolled back. No business validation happens here.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from huddle.core.errors import StoreConflictError, StoreError
from huddle.models import (
    Comment,
    Follow,
    Hashtag,
    Like,
    Post,
    PostHashtag,
    Profile,
    VerificationRequest,
)
from huddle.models.verification import ACTIVE_STATES

__all__ = ["RelationshipStore", "COUNTER_FIELDS"]

# Counter columns that may be moved through ``adjust_counter``.
COUNTER_FIELDS: dict[type, frozenset[str]] = {
    Profile: frozenset({"follower_count", "following_count"}),
    Post: frozenset({"like_count", "comment_count"}),
    Hashtag: frozenset({"post_count"}),
}


class RelationshipStore:
    """Typed access to profiles, posts, edges, hashtags and verification requests."""

    def __init__(self, session: Session) -> None:
        """Initialize the store with a SQLAlchemy session."""
        self.session = session

    @contextmanager
    def _reading(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StoreError(f"Store read failed: {operation}", operation=operation) from err

    @contextmanager
    def _writing(self, operation: str) -> Iterator[None]:
        try:
            yield
            self.session.commit()
        except IntegrityError as err:
            self.session.rollback()
            raise StoreConflictError(
                f"Store rejected {operation}: constraint violation",
                operation=operation,
            ) from err
        except SQLAlchemyError as err:
            self.session.rollback()
            raise StoreError(f"Store write failed: {operation}", operation=operation) from err

    # Counters

    def adjust_counter(self, model: type, entity_id: str, field: str, delta: int) -> None:
        """Atomically add ``delta`` to a counter column, clamping at zero.

        The adjustment is a single ``UPDATE`` evaluated by the database, so
        concurrent adjustments never lose each other's updates.

        Raises:
            ValueError: If ``field`` is not a registered counter of ``model``.
            StoreError: If the update fails or matches no row.
        """
        if field not in COUNTER_FIELDS.get(model, frozenset()):
            raise ValueError(f"{model.__name__}.{field} is not a counter column")

        column = getattr(model, field)
        adjusted = column + delta
        stmt = (
            update(model)
            .where(model.id == entity_id)
            .values({field: case((adjusted < 0, 0), else_=adjusted)})
            .execution_options(synchronize_session=False)
        )
        operation = f"adjust {model.__tablename__}.{field}"
        with self._writing(operation):
            result = self.session.execute(stmt)
        # Loaded instances may hold a stale value; reload on next access.
        self.session.expire_all()
        if result.rowcount == 0:
            raise StoreError(
                f"Store write failed: {operation} matched no row",
                operation=operation,
                entity_id=entity_id,
            )

    # Profiles

    def get_profile(self, profile_id: str) -> Profile | None:
        with self._reading("get profile"):
            return self.session.get(Profile, profile_id)

    def get_profile_by_username(self, username: str) -> Profile | None:
        with self._reading("get profile by username"):
            return self.session.scalars(
                select(Profile).where(Profile.username == username)
            ).first()

    def insert_profile(self, **fields: Any) -> Profile:
        profile = Profile(**fields)
        with self._writing("insert profile"):
            self.session.add(profile)
        return profile

    def update_profile(self, profile_id: str, updates: dict[str, Any]) -> Profile | None:
        """Apply column updates to a profile and return the refreshed row."""
        with self._writing("update profile"):
            result = self.session.execute(
                update(Profile)
                .where(Profile.id == profile_id)
                .values(**updates)
                .execution_options(synchronize_session=False)
            )
        if result.rowcount == 0:
            return None
        self.session.expire_all()
        return self.get_profile(profile_id)

    def list_profiles(
        self,
        *,
        offset: int,
        limit: int,
        search: str | None = None,
    ) -> list[Profile]:
        """Return profiles newest first, optionally filtered by a search term."""
        stmt = select(Profile)
        if search:
            stmt = stmt.where(_profile_matches(search))
        stmt = stmt.order_by(Profile.created_at.desc(), Profile.id.desc()).offset(offset).limit(limit)
        with self._reading("list profiles"):
            return list(self.session.scalars(stmt))

    def search_profiles(self, term: str, limit: int) -> list[Profile]:
        with self._reading("search profiles"):
            return list(
                self.session.scalars(
                    select(Profile).where(_profile_matches(term)).limit(limit)
                )
            )

    def count_profiles(self, *, verified: bool | None = None) -> int:
        stmt = select(func.count()).select_from(Profile)
        if verified is not None:
            stmt = stmt.where(Profile.is_verified.is_(verified))
        with self._reading("count profiles"):
            return int(self.session.scalar(stmt) or 0)

    # Posts

    def get_post(self, post_id: str) -> Post | None:
        with self._reading("get post"):
            return self.session.get(Post, post_id)

    def insert_post(self, **fields: Any) -> Post:
        post = Post(**fields)
        with self._writing("insert post"):
            self.session.add(post)
        return post

    def delete_post(self, post_id: str) -> bool:
        """Delete a post; likes, comments and hashtag links cascade."""
        with self._writing("delete post"):
            result = self.session.execute(delete(Post).where(Post.id == post_id))
        self.session.expire_all()
        return result.rowcount > 0

    def list_posts(self, *, offset: int, limit: int) -> list[Post]:
        """Return one page of posts newest first, author projection joined."""
        stmt = (
            select(Post)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        with self._reading("list posts"):
            return list(self.session.scalars(stmt))

    def list_posts_by_user(self, user_id: str) -> list[Post]:
        stmt = (
            select(Post)
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        with self._reading("list posts by user"):
            return list(self.session.scalars(stmt))

    def sum_like_counts(self, user_id: str) -> int:
        """Total ``like_count`` over every post authored by ``user_id``."""
        stmt = select(func.coalesce(func.sum(Post.like_count), 0)).where(Post.user_id == user_id)
        with self._reading("sum like counts"):
            return int(self.session.scalar(stmt) or 0)

    def search_posts(self, term: str, limit: int) -> list[Post]:
        stmt = (
            select(Post)
            .where(Post.content.icontains(term, autoescape=True))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
        )
        with self._reading("search posts"):
            return list(self.session.scalars(stmt))

    def count_posts(self) -> int:
        with self._reading("count posts"):
            return int(self.session.scalar(select(func.count()).select_from(Post)) or 0)

    # Follow edges

    def get_follow(self, follower_id: str, following_id: str) -> Follow | None:
        with self._reading("get follow"):
            return self.session.get(Follow, (follower_id, following_id))

    def insert_follow(self, follower_id: str, following_id: str) -> Follow:
        follow = Follow(follower_id=follower_id, following_id=following_id)
        with self._writing("insert follow"):
            self.session.add(follow)
        return follow

    def delete_follow(self, follower_id: str, following_id: str) -> bool:
        with self._writing("delete follow"):
            result = self.session.execute(
                delete(Follow).where(
                    Follow.follower_id == follower_id,
                    Follow.following_id == following_id,
                )
            )
        return result.rowcount > 0

    def list_followers(self, user_id: str) -> list[Profile]:
        """Profiles following ``user_id``."""
        stmt = (
            select(Profile)
            .join(Follow, Follow.follower_id == Profile.id)
            .where(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc())
        )
        with self._reading("list followers"):
            return list(self.session.scalars(stmt))

    def list_following(self, user_id: str) -> list[Profile]:
        """Profiles that ``user_id`` follows."""
        stmt = (
            select(Profile)
            .join(Follow, Follow.following_id == Profile.id)
            .where(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc())
        )
        with self._reading("list following"):
            return list(self.session.scalars(stmt))

    # Like edges

    def get_like(self, post_id: str, user_id: str) -> Like | None:
        with self._reading("get like"):
            return self.session.get(Like, (post_id, user_id))

    def insert_like(self, post_id: str, user_id: str) -> Like:
        like = Like(post_id=post_id, user_id=user_id)
        with self._writing("insert like"):
            self.session.add(like)
        return like

    def delete_like(self, post_id: str, user_id: str) -> bool:
        with self._writing("delete like"):
            result = self.session.execute(
                delete(Like).where(Like.post_id == post_id, Like.user_id == user_id)
            )
        return result.rowcount > 0

    def liked_post_ids(self, user_id: str, post_ids: Iterable[str]) -> set[str]:
        """Return the subset of ``post_ids`` liked by ``user_id`` in one query."""
        ids = list(post_ids)
        if not ids:
            return set()
        stmt = select(Like.post_id).where(Like.user_id == user_id, Like.post_id.in_(ids))
        with self._reading("liked post ids"):
            return set(self.session.scalars(stmt))

    # Comments

    def get_comment(self, comment_id: str) -> Comment | None:
        with self._reading("get comment"):
            return self.session.get(Comment, comment_id)

    def insert_comment(self, post_id: str, user_id: str, content: str) -> Comment:
        comment = Comment(post_id=post_id, user_id=user_id, content=content)
        with self._writing("insert comment"):
            self.session.add(comment)
        return comment

    def delete_comment(self, comment_id: str) -> bool:
        with self._writing("delete comment"):
            result = self.session.execute(delete(Comment).where(Comment.id == comment_id))
        return result.rowcount > 0

    def list_comments(self, post_id: str) -> list[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        with self._reading("list comments"):
            return list(self.session.scalars(stmt))

    # Hashtags

    def insert_or_get_hashtag(self, tag: str) -> Hashtag:
        """Insert ``tag`` if absent and return its row.

        Uses ``INSERT ... ON CONFLICT DO NOTHING`` on the unique tag column so
        concurrent posts using a new tag resolve to a single row.
        """
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert as dialect_insert
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as dialect_insert
        else:  # pragma: no cover - other backends fall back to check-then-insert
            dialect_insert = None

        if dialect_insert is not None:
            stmt = (
                dialect_insert(Hashtag)
                .values(id=str(uuid.uuid4()), tag=tag, post_count=0)
                .on_conflict_do_nothing(index_elements=["tag"])
            )
            with self._writing("upsert hashtag"):
                self.session.execute(stmt)
        elif self.get_hashtag_by_tag(tag) is None:
            try:
                with self._writing("insert hashtag"):
                    self.session.add(Hashtag(tag=tag, post_count=0))
            except StoreConflictError:
                pass  # Lost the race; the row exists now.

        hashtag = self.get_hashtag_by_tag(tag)
        if hashtag is None:
            raise StoreError(f"Store write failed: hashtag {tag!r} missing after upsert", tag=tag)
        return hashtag

    def get_hashtag_by_tag(self, tag: str) -> Hashtag | None:
        with self._reading("get hashtag"):
            return self.session.scalars(select(Hashtag).where(Hashtag.tag == tag)).first()

    def link_post_hashtag(self, post_id: str, hashtag_id: str) -> PostHashtag:
        link = PostHashtag(post_id=post_id, hashtag_id=hashtag_id)
        with self._writing("link post hashtag"):
            self.session.add(link)
        return link

    def list_post_hashtag_links(self, post_id: str) -> list[PostHashtag]:
        with self._reading("list post hashtag links"):
            return list(
                self.session.scalars(select(PostHashtag).where(PostHashtag.post_id == post_id))
            )

    def list_hashtag_posts(self, hashtag_id: str) -> list[Post]:
        stmt = (
            select(Post)
            .join(PostHashtag, PostHashtag.post_id == Post.id)
            .where(PostHashtag.hashtag_id == hashtag_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        with self._reading("list hashtag posts"):
            return list(self.session.scalars(stmt))

    def top_hashtags(self, limit: int) -> list[Hashtag]:
        stmt = select(Hashtag).order_by(Hashtag.post_count.desc(), Hashtag.tag).limit(limit)
        with self._reading("top hashtags"):
            return list(self.session.scalars(stmt))

    def search_hashtags(self, term: str, limit: int) -> list[Hashtag]:
        stmt = (
            select(Hashtag)
            .where(Hashtag.tag.icontains(term, autoescape=True))
            .order_by(Hashtag.post_count.desc(), Hashtag.tag)
            .limit(limit)
        )
        with self._reading("search hashtags"):
            return list(self.session.scalars(stmt))

    def count_hashtags(self) -> int:
        with self._reading("count hashtags"):
            return int(self.session.scalar(select(func.count()).select_from(Hashtag)) or 0)

    # Verification requests

    def get_verification_request(self, request_id: str) -> VerificationRequest | None:
        with self._reading("get verification request"):
            return self.session.get(VerificationRequest, request_id)

    def find_active_verification_request(self, user_id: str) -> VerificationRequest | None:
        """Return the subject's pending or approved request, if any."""
        stmt = select(VerificationRequest).where(
            VerificationRequest.user_id == user_id,
            VerificationRequest.status.in_(ACTIVE_STATES),
        )
        with self._reading("find active verification request"):
            return self.session.scalars(stmt).first()

    def latest_verification_request(self, user_id: str) -> VerificationRequest | None:
        stmt = (
            select(VerificationRequest)
            .where(VerificationRequest.user_id == user_id)
            .order_by(VerificationRequest.created_at.desc(), VerificationRequest.id.desc())
            .limit(1)
        )
        with self._reading("latest verification request"):
            return self.session.scalars(stmt).first()

    def insert_verification_request(self, user_id: str, status: str) -> VerificationRequest:
        request = VerificationRequest(user_id=user_id, status=status)
        with self._writing("insert verification request"):
            self.session.add(request)
        return request

    def update_verification_request(
        self,
        request_id: str,
        *,
        status: str,
        reviewed_at: datetime,
        expected_status: str | None = None,
    ) -> VerificationRequest | None:
        """Set the request's status, optionally only while it still has ``expected_status``.

        Returns ``None`` when no row matched; cached rows are expired either way
        so a follow-up read sees the current status.
        """
        stmt = update(VerificationRequest).where(VerificationRequest.id == request_id)
        if expected_status is not None:
            stmt = stmt.where(VerificationRequest.status == expected_status)
        with self._writing("update verification request"):
            result = self.session.execute(
                stmt
                .values(status=status, reviewed_at=reviewed_at)
                .execution_options(synchronize_session=False)
            )
        self.session.expire_all()
        if result.rowcount == 0:
            return None
        return self.get_verification_request(request_id)

    def list_verification_requests(self, status: str | None = None) -> list[VerificationRequest]:
        stmt = select(VerificationRequest)
        if status is not None:
            stmt = stmt.where(VerificationRequest.status == status)
        stmt = stmt.order_by(VerificationRequest.created_at.desc(), VerificationRequest.id.desc())
        with self._reading("list verification requests"):
            return list(self.session.scalars(stmt))

    def count_verification_requests(self, status: str) -> int:
        stmt = (
            select(func.count())
            .select_from(VerificationRequest)
            .where(VerificationRequest.status == status)
        )
        with self._reading("count verification requests"):
            return int(self.session.scalar(stmt) or 0)


def _profile_matches(term: str):
    return or_(
        Profile.username.icontains(term, autoescape=True),
        Profile.display_name.icontains(term, autoescape=True),
    )
