"""Hashtag extraction and indexing."""

from __future__ import annotations

import logging
import re

from huddle.core.errors import StoreError
from huddle.models import Hashtag
from huddle.repositories.store import RelationshipStore

logger = logging.getLogger(__name__)

__all__ = ["HASHTAG_PATTERN", "HashtagIndexer", "canonical_tag", "extract_hashtags"]

# ``#`` followed by ASCII word characters.
HASHTAG_PATTERN = re.compile(r"#\w+", re.ASCII)


def canonical_tag(raw: str) -> str:
    """Return the storage key for a tag typed with or without ``#``."""
    tag = raw.strip().lower()
    return tag if tag.startswith("#") else f"#{tag}"


def extract_hashtags(text: str | None) -> list[str]:
    """Return the canonical tags in ``text`` in first-occurrence order.

    >>> extract_hashtags("Hello #World and #world!")
    ['#world']
    """
    if not text or not text.strip():
        return []
    seen: dict[str, None] = {}
    for match in HASHTAG_PATTERN.findall(text):
        seen.setdefault(match.lower(), None)
    return list(seen)


class HashtagIndexer:
    """Links a freshly created post to its hashtags.

    Each tag is processed on its own; a failure is logged and the remaining
    tags are still indexed, because the post itself is already committed.
    """

    def __init__(self, store: RelationshipStore) -> None:
        self.store = store

    def index_post(self, post_id: str, content: str | None) -> list[str]:
        """Upsert, link and count every tag in ``content``.

        Returns:
            The tags that were fully indexed.
        """
        indexed: list[str] = []
        for tag in extract_hashtags(content):
            try:
                hashtag = self.store.insert_or_get_hashtag(tag)
                self.store.link_post_hashtag(post_id, hashtag.id)
                self.store.adjust_counter(Hashtag, hashtag.id, "post_count", 1)
            except StoreError as exc:
                logger.warning(
                    "Hashtag indexing failed for %s on post %s: %s",
                    tag,
                    post_id,
                    exc.message,
                    extra={"tag": tag, "post_id": post_id},
                )
                continue
            indexed.append(tag)
        return indexed
