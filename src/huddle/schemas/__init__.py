"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse
from .hashtag import HashtagPostsResponse, HashtagResponse, SearchResults
from .post import FeedPage, LikeResult, PostResponse, PostView, ProfilePage
from .profile import (
    AuthorSummary,
    ProfileCreate,
    ProfileResponse,
    ProfileView,
)
from .verification import (
    AdminStats,
    VerificationRequestResponse,
    VerificationStatusResponse,
)

__all__ = [
    "CommentCreate", "CommentResponse",
    "HashtagPostsResponse", "HashtagResponse", "SearchResults",
    "FeedPage", "LikeResult", "PostResponse", "PostView",
    "AuthorSummary", "ProfileCreate", "ProfilePage", "ProfileResponse", "ProfileView",
    "AdminStats", "VerificationRequestResponse", "VerificationStatusResponse",
]
