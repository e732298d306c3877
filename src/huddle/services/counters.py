"""Counter reconciliation for follow, like and comment edges.

Every state-changing edge operation follows the same protocol:

1. read the current edge state to decide whether the mutation is needed;
2. mutate the edge (insert or delete);
3. adjust the derived counters on the related records, one delta at a time.

If step 2 fails nothing else happens. If an adjustment in step 3 fails, the
edge mutation stands, the operation still succeeds, and the divergence is
logged as counter drift for out-of-band repair.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from huddle.core.errors import (
    ConflictError,
    NotFoundError,
    StoreConflictError,
    StoreError,
    ValidationFailedError,
)
from huddle.models import Comment, Post, Profile
from huddle.repositories.store import RelationshipStore

logger = logging.getLogger(__name__)

__all__ = ["CounterAdjustment", "CounterReconciliationEngine", "EdgeMutation"]


@dataclass(frozen=True)
class CounterAdjustment:
    """A single delta applied to one counter column of one record."""

    model: type
    entity_id: str
    field: str
    delta: int

    def describe(self) -> str:
        return f"{self.model.__tablename__}.{self.field} {self.delta:+d} on {self.entity_id}"


@dataclass(frozen=True)
class EdgeMutation:
    """Result of an edge operation.

    Attributes:
        active: Whether the edge exists after the operation.
        drift: Counter adjustments that could not be applied.
    """

    active: bool
    drift: tuple[CounterAdjustment, ...] = ()


class CounterReconciliationEngine:
    """Keeps follower, following, like and comment counters in step with edges."""

    def __init__(self, store: RelationshipStore) -> None:
        self.store = store

    def _apply(self, operation: str, *adjustments: CounterAdjustment) -> tuple[CounterAdjustment, ...]:
        drift: list[CounterAdjustment] = []
        for adjustment in adjustments:
            try:
                self.store.adjust_counter(
                    adjustment.model,
                    adjustment.entity_id,
                    adjustment.field,
                    adjustment.delta,
                )
            except StoreError as exc:
                logger.warning(
                    "Counter drift after %s: %s not applied (%s)",
                    operation,
                    adjustment.describe(),
                    exc.message,
                    extra={
                        "entity": adjustment.model.__tablename__,
                        "entity_id": adjustment.entity_id,
                        "field": adjustment.field,
                        "delta": adjustment.delta,
                    },
                )
                drift.append(adjustment)
        return tuple(drift)

    def follow(self, follower_id: str, followee_id: str) -> EdgeMutation:
        """Create the follow edge ``follower -> followee``.

        Raises:
            ValidationFailedError: If a profile tries to follow itself.
            NotFoundError: If the followee does not exist.
            ConflictError: If the edge already exists.
        """
        if follower_id == followee_id:
            raise ValidationFailedError("Cannot follow yourself")
        if self.store.get_profile(followee_id) is None:
            raise NotFoundError("User not found")
        if self.store.get_follow(follower_id, followee_id) is not None:
            raise ConflictError("Already following this user", reason="already_following")

        try:
            self.store.insert_follow(follower_id, followee_id)
        except StoreConflictError as exc:
            # Lost a race with an identical follow; the unique key decided.
            raise ConflictError("Already following this user", reason="already_following") from exc

        drift = self._apply(
            "follow",
            CounterAdjustment(Profile, follower_id, "following_count", 1),
            CounterAdjustment(Profile, followee_id, "follower_count", 1),
        )
        return EdgeMutation(active=True, drift=drift)

    def unfollow(self, follower_id: str, followee_id: str) -> EdgeMutation:
        """Remove the follow edge ``follower -> followee``.

        Raises:
            NotFoundError: If the edge does not exist; no counter is touched.
        """
        if self.store.get_follow(follower_id, followee_id) is None:
            raise NotFoundError("Not following this user")
        if not self.store.delete_follow(follower_id, followee_id):
            # Removed concurrently; the other request owns the decrement.
            raise NotFoundError("Not following this user")

        drift = self._apply(
            "unfollow",
            CounterAdjustment(Profile, follower_id, "following_count", -1),
            CounterAdjustment(Profile, followee_id, "follower_count", -1),
        )
        return EdgeMutation(active=False, drift=drift)

    def toggle_like(self, user_id: str, post_id: str) -> EdgeMutation:
        """Like the post if not yet liked, otherwise remove the like.

        This is a toggle: replaying the same call flips the state again.
        """
        if self.store.get_post(post_id) is None:
            raise NotFoundError("Post not found")

        if self.store.get_like(post_id, user_id) is not None:
            if not self.store.delete_like(post_id, user_id):
                raise ConflictError("Like was removed concurrently", reason="like_changed")
            drift = self._apply("unlike", CounterAdjustment(Post, post_id, "like_count", -1))
            return EdgeMutation(active=False, drift=drift)

        try:
            self.store.insert_like(post_id, user_id)
        except StoreConflictError as exc:
            raise ConflictError("Post already liked", reason="like_changed") from exc
        drift = self._apply("like", CounterAdjustment(Post, post_id, "like_count", 1))
        return EdgeMutation(active=True, drift=drift)

    def add_comment(self, user_id: str, post_id: str, content: str | None) -> Comment:
        """Insert a comment and bump the post's ``comment_count``.

        A failed bump is logged as drift like the edge operations, but the
        caller only receives the comment.
        """
        if content is None or not content.strip():
            raise ValidationFailedError("Comment content required")
        if self.store.get_post(post_id) is None:
            raise NotFoundError("Post not found")

        comment = self.store.insert_comment(post_id, user_id, content)
        self._apply("comment", CounterAdjustment(Post, post_id, "comment_count", 1))
        return comment

    def delete_comment(self, comment_id: str) -> None:
        """Remove a comment as a moderation action.

        ``comment_count`` on the post is intentionally left unchanged.
        """
        if self.store.get_comment(comment_id) is None:
            raise NotFoundError("Comment not found")
        self.store.delete_comment(comment_id)

    def list_comments(self, post_id: str) -> list[Comment]:
        """Comments on a post, newest first."""
        return self.store.list_comments(post_id)
