"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .posts import router as posts_router
from .search import router as search_router
from .users import router as users_router
from .verification import router as verification_router

__all__ = [
    "admin_router",
    "posts_router",
    "search_router",
    "users_router",
    "verification_router",
]
