"""API endpoint modules."""

from .admin import router as admin_router
from .beta import router as beta_router
from .engagement import router as engagement_router
from .feed import router as feed_router
from .messages import router as messages_router
from .posts import router as posts_router
from .subscriptions import router as subscriptions_router
from .system import router as system_router
from .tracking import router as tracking_router
from .uploads import router as uploads_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "beta_router",
    "engagement_router",
    "feed_router",
    "messages_router",
    "posts_router",
    "subscriptions_router",
    "system_router",
    "tracking_router",
    "uploads_router",
    "users_router",
]
