"""Recompute cached counters from the edge tables and repair drift.

Counter adjustments that fail after an edge write are logged and left for
this job. By default it checks the follow and like counters; comment and
hashtag counters are opt-in because comment and post deletions do not
decrement them.

Usage:
    python -m huddle.scripts.reconcile_counters [--apply] [--fields FIELD ...]
"""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from huddle.core.logging import configure_logging
from huddle.models import Comment, Follow, Hashtag, Like, Post, PostHashtag, Profile

logger = logging.getLogger(__name__)

# field name -> (model, counter column, edge column referencing the model)
COUNTER_SOURCES = {
    "follower_count": (Profile, Profile.follower_count, Follow.following_id),
    "following_count": (Profile, Profile.following_count, Follow.follower_id),
    "like_count": (Post, Post.like_count, Like.post_id),
    "comment_count": (Post, Post.comment_count, Comment.post_id),
    "post_count": (Hashtag, Hashtag.post_count, PostHashtag.hashtag_id),
}
DEFAULT_FIELDS = ("follower_count", "following_count", "like_count")


@dataclass(frozen=True)
class CounterDrift:
    """A counter whose cached value disagrees with its edge count."""

    table: str
    entity_id: str
    field: str
    cached: int
    actual: int


def find_drift(session: Session, fields: tuple[str, ...] = DEFAULT_FIELDS) -> list[CounterDrift]:
    """Compare cached counters with edge counts."""
    drift: list[CounterDrift] = []
    for field in fields:
        model, counter, edge_column = COUNTER_SOURCES[field]
        edge_counts = (
            select(edge_column.label("entity_id"), func.count().label("actual"))
            .group_by(edge_column)
            .subquery()
        )
        rows = session.execute(
            select(model.id, counter, func.coalesce(edge_counts.c.actual, 0))
            .outerjoin(edge_counts, edge_counts.c.entity_id == model.id)
            .where(counter != func.coalesce(edge_counts.c.actual, 0))
        )
        for entity_id, cached, actual in rows:
            drift.append(
                CounterDrift(
                    table=model.__tablename__,
                    entity_id=entity_id,
                    field=field,
                    cached=int(cached),
                    actual=int(actual),
                )
            )
    return drift


def repair(session: Session, drift: list[CounterDrift]) -> None:
    """Overwrite drifted counters with their edge counts."""
    for item in drift:
        model = COUNTER_SOURCES[item.field][0]
        session.execute(
            update(model)
            .where(model.id == item.entity_id)
            .values({item.field: item.actual})
            .execution_options(synchronize_session=False)
        )
    session.commit()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--apply", action="store_true", help="Write corrected values")
    parser.add_argument(
        "--fields",
        nargs="+",
        choices=sorted(COUNTER_SOURCES),
        default=list(DEFAULT_FIELDS),
    )
    args = parser.parse_args(argv)

    configure_logging()
    from huddle.db.session import SessionLocal

    with SessionLocal() as session:
        drift = find_drift(session, tuple(args.fields))
        for item in drift:
            logger.info(
                "%s.%s on %s: cached=%d actual=%d",
                item.table,
                item.field,
                item.entity_id,
                item.cached,
                item.actual,
            )
        if args.apply and drift:
            repair(session, drift)
            logger.info("Repaired %d counters", len(drift))
        elif not drift:
            logger.info("No counter drift found")
    return 0


if __name__ == "__main__":
    sys.exit(main())
