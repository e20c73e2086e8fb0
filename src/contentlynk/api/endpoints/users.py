"""Self-service profile endpoints for the signed-in user."""

import logging

from fastapi import APIRouter

from contentlynk.api.dependencies import CurrentUserDep, SessionDep
from contentlynk.schemas.user import ProfileEnvelope, ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["users"])


@router.get("/profile", response_model=ProfileEnvelope)
async def get_profile(current_user: CurrentUserDep) -> ProfileEnvelope:
    return ProfileEnvelope(user=ProfileResponse.model_validate(current_user))


@router.put("/profile", response_model=ProfileEnvelope)
async def update_profile(payload: ProfileUpdate, current_user: CurrentUserDep, db: SessionDep) -> ProfileEnvelope:
    """Update display name, legal name, bio or avatar; only fields sent are touched."""
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("avatar_url") is not None:
        changes["avatar_url"] = str(changes["avatar_url"])

    for key, value in changes.items():
        setattr(current_user, key, value)
    db.commit()
    db.refresh(current_user)

    logger.info("Profile updated for user %s: %s", current_user.id, sorted(changes))
    return ProfileEnvelope(user=ProfileResponse.model_validate(current_user))
