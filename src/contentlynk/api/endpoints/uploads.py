"""Video and profile image uploads backed by S3."""

import logging

from fastapi import APIRouter, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from contentlynk.api.dependencies import CurrentUserDep, SessionDep, StorageServiceDep
from contentlynk.core.errors import InvalidRequestError, ServiceUnavailableError
from contentlynk.schemas.upload import PresignedVideoRequest, PresignedVideoResponse, ProfileImageResponse
from contentlynk.services.images import WEBP_CONTENT_TYPE, process_profile_image
from contentlynk.services.rate_limit import check_upload_rate_limit, record_upload
from contentlynk.services.storage import (
    ALLOWED_IMAGE_TYPES,
    ALLOWED_VIDEO_TYPES,
    MAX_PROFILE_IMAGE_SIZE,
    MAX_VIDEO_SIZE,
    generate_profile_image_key,
    generate_video_key,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["uploads"])


@router.post("/video/presigned", response_model=PresignedVideoResponse)
async def presign_video_upload(
    payload: PresignedVideoRequest,
    current_user: CurrentUserDep,
    storage: StorageServiceDep,
) -> PresignedVideoResponse:
    """Return a presigned PUT URL so the browser uploads the video straight to S3."""
    if not storage.configured:
        raise ServiceUnavailableError("AWS S3 is not configured. Please set up AWS credentials.")
    if payload.content_type not in ALLOWED_VIDEO_TYPES:
        raise InvalidRequestError("Invalid file type. Only video files are allowed.")
    if payload.file_size is not None and payload.file_size > MAX_VIDEO_SIZE:
        raise InvalidRequestError("File too large. Maximum size is 2GB.")

    key = generate_video_key(current_user.id, payload.filename)
    upload = storage.presign_upload(key, payload.content_type)
    logger.info("Issued video upload URL for user %s: %s", current_user.id, key)
    return PresignedVideoResponse(upload_url=upload.upload_url, key=upload.key, expires_in=upload.expires_in)


@router.post("/profile-image", response_model=ProfileImageResponse)
async def upload_profile_image(
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageServiceDep,
    file: UploadFile | None = File(None),
) -> ProfileImageResponse | JSONResponse:
    """Validate, resize and store a new avatar; limited to a few uploads per hour per user."""
    limit = check_upload_rate_limit(db, current_user.id)
    if not limit.allowed:
        minutes = limit.reset_in_minutes
        plural = "" if minutes == 1 else "s"
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "error": f"Upload limit reached. Please try again in {minutes} minute{plural}.",
                "rate_limit_exceeded": True,
                "reset_in": limit.reset_in,
            },
        )

    if file is None:
        raise InvalidRequestError("No file uploaded")
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise InvalidRequestError("Invalid file type. Only JPG, PNG, and WebP are allowed.")

    data = await file.read(MAX_PROFILE_IMAGE_SIZE + 1)
    if len(data) > MAX_PROFILE_IMAGE_SIZE:
        raise InvalidRequestError("File too large. Maximum size is 2MB.")

    variants = await run_in_threadpool(process_profile_image, data, file.content_type)

    base_key = generate_profile_image_key(current_user.id)
    url = storage.put_object(f"{base_key}-full.webp", variants.full.data, WEBP_CONTENT_TYPE)
    thumbnail_url = storage.put_object(f"{base_key}-thumb.webp", variants.thumbnail.data, WEBP_CONTENT_TYPE)
    current_user.avatar_url = url
    db.flush()
    record_upload(db, current_user.id)
    db.commit()

    logger.info("Stored profile image for user %s: %s (%s bytes)", current_user.id, base_key, variants.full.size)

    return ProfileImageResponse(
        avatar_url=url,
        thumbnail_url=thumbnail_url,
        size=variants.full.size,
        remaining_uploads=max(0, limit.remaining - 1),
    )
