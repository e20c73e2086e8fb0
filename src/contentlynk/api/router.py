"""API router wiring.

This module composes the API surface by including the endpoint routers,
which declare their own prefixes and tags. It contains no endpoint
definitions.
"""
from __future__ import annotations

from typing import Final

from fastapi import APIRouter

from .endpoints import (
    admin_router,
    beta_router,
    engagement_router,
    feed_router,
    messages_router,
    posts_router,
    subscriptions_router,
    system_router,
    tracking_router,
    uploads_router,
    users_router,
)

api_router: Final[APIRouter] = APIRouter(prefix="/api")
for _router in (
    posts_router,
    engagement_router,
    feed_router,
    tracking_router,
    messages_router,
    subscriptions_router,
    uploads_router,
    users_router,
    admin_router,
    beta_router,
    system_router,
):
    api_router.include_router(_router)

__all__ = ["api_router"]
