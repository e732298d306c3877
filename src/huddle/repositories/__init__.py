"""Data access layer for the Huddle relational store."""

from .store import COUNTER_FIELDS, RelationshipStore

__all__ = ["COUNTER_FIELDS", "RelationshipStore"]
