"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    posts_router,
    search_router,
    users_router,
    verification_router,
)

__all__ = [
    "admin_router",
    "posts_router",
    "search_router",
    "users_router",
    "verification_router",
]
