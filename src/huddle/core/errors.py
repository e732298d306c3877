"""Error taxonomy for the social-graph core.

Services raise these exceptions; the HTTP layer converts them to JSON
responses through a single exception handler keyed on ``status_code``.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "HuddleError",
    "NotFoundError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
    "ValidationFailedError",
    "StoreError",
    "StoreConflictError",
]


class HuddleError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str = "Internal server error", **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body sent to API clients."""
        return {"error": self.message}


class NotFoundError(HuddleError):
    """Referenced entity does not exist."""

    status_code = 404


class ConflictError(HuddleError):
    """Operation would violate a uniqueness or state-machine invariant."""

    status_code = 400

    def __init__(self, message: str, reason: str | None = None, **context: Any) -> None:
        super().__init__(message, **context)
        self.reason = reason

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.reason:
            body["reason"] = self.reason
        return body


class UnauthorizedError(HuddleError):
    """Caller could not be authenticated."""

    status_code = 401


class ForbiddenError(HuddleError):
    """Caller lacks rights over the target entity."""

    status_code = 403


class ValidationFailedError(HuddleError):
    """Required input is missing or malformed."""

    status_code = 400


class StoreError(HuddleError):
    """The relational or blob store rejected or failed an operation."""

    status_code = 500


class StoreConflictError(StoreError):
    """The store rejected a write because of a unique or foreign-key constraint."""

    status_code = 400
