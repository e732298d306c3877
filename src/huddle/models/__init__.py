"""SQLAlchemy models for the Huddle application."""

from .comment import Comment
from .follow import Follow
from .hashtag import Hashtag, PostHashtag
from .like import Like
from .post import Post
from .profile import Profile
from .verification import VerificationRequest, VerificationState

__all__ = [
    "Comment",
    "Follow",
    "Hashtag", "PostHashtag",
    "Like",
    "Post",
    "Profile",
    "VerificationRequest", "VerificationState",
]
