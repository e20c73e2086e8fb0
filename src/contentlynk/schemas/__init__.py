"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .beta import BetaApplicationCreate, BetaApplicationResponse, ReviewRequest
from .engagement import CommentCreate, EngagementResponse
from .message import MessageCreate, MessageRespond, MessageResponse
from .post import FeedResponse, PostCreate, PostResponse, PostUpdate
from .tracking import ConsumptionReportIn, ConsumptionResponse
from .upload import PresignedVideoRequest, PresignedVideoResponse
from .user import AdminUserResponse, BulkDeleteRequest, SubscribeRequest, UserResponse

__all__ = [
    "BetaApplicationCreate", "BetaApplicationResponse", "ReviewRequest",
    "CommentCreate", "EngagementResponse",
    "MessageCreate", "MessageRespond", "MessageResponse",
    "FeedResponse", "PostCreate", "PostResponse", "PostUpdate",
    "ConsumptionReportIn", "ConsumptionResponse",
    "PresignedVideoRequest", "PresignedVideoResponse",
    "AdminUserResponse", "BulkDeleteRequest", "SubscribeRequest", "UserResponse",
]
