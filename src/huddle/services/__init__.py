"""Business logic services for the Huddle application."""

from .admin import AdminService
from .counters import CounterReconciliationEngine, EdgeMutation
from .feed import FeedAssembler
from .hashtags import HashtagIndexer, extract_hashtags
from .media import LocalMediaStorage, MediaUpload, get_media_storage
from .posts import PostService
from .profiles import ProfileService
from .search import SearchService
from .verification import VerificationWorkflow

__all__ = [
    "AdminService",
    "CounterReconciliationEngine",
    "EdgeMutation",
    "FeedAssembler",
    "HashtagIndexer",
    "extract_hashtags",
    "LocalMediaStorage",
    "MediaUpload",
    "get_media_storage",
    "PostService",
    "ProfileService",
    "SearchService",
    "VerificationWorkflow",
]
