"""System endpoints exposing public configuration."""

from fastapi import APIRouter

from contentlynk.api.dependencies import ModeConfigDep
from contentlynk.core.settings import settings

router = APIRouter(prefix="/system", tags=["system"])


@router.get("/config")
async def get_public_config(mode: ModeConfigDep) -> dict[str, object]:
    """Return configuration the frontend needs, including the platform mode."""
    return {
        "app_name": settings.app_name,
        "version": settings.app_version,
        "platform_mode": mode.mode,
        "is_beta": mode.is_beta,
        "earning_caps": {
            "per_post": mode.caps.per_post,
            "daily": mode.caps.daily,
            "enforced": mode.caps.enforced,
        },
        "cap_action": mode.action,
        "grace_period_days": mode.grace_period_days,
        "max_image_uploads_per_hour": settings.max_image_uploads_per_hour,
        "engagement_rate_limit_per_hour": settings.engagement_rate_limit_per_hour,
    }
