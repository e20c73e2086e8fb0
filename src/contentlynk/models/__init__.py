# src/contentlynk/models/__init__.py
"""SQLAlchemy models for the ContentLynk application."""

from .beta import BetaApplication
from .engagement import ENGAGEMENT_KINDS, Bookmark, Comment, Engagement, LegacyLike
from .message import Message
from .post import Post
from .subscriber import EmailSubscriber
from .tracking import ImageUploadRateLimit, PostConsumption, ViewLog
from .user import EmailVerificationToken, User, UserDeletionLog

__all__ = [
    "BetaApplication",
    "ENGAGEMENT_KINDS", "Bookmark", "Comment", "Engagement", "LegacyLike",
    "Message",
    "Post",
    "EmailSubscriber",
    "ImageUploadRateLimit", "PostConsumption", "ViewLog",
    "EmailVerificationToken", "User", "UserDeletionLog",
]
