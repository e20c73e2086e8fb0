# src/contentlynk/services/storage.py
"""S3 object storage for videos and profile images."""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from contentlynk.core.errors import ServiceUnavailableError
from contentlynk.core.settings import settings

logger = logging.getLogger(__name__)

PRESIGNED_URL_TTL_SECONDS = 3600

ALLOWED_VIDEO_TYPES = frozenset({
    "video/mp4",
    "video/mpeg",
    "video/quicktime",
    "video/x-msvideo",
    "video/x-ms-wmv",
    "video/webm",
})
MAX_VIDEO_SIZE = 2 * 1024 * 1024 * 1024  # 2GB

ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})
MAX_PROFILE_IMAGE_SIZE = 2 * 1024 * 1024  # 2MB


@dataclass(frozen=True)
class PresignedUpload:
    upload_url: str
    key: str
    expires_in: int


def _unique_suffix() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"


def generate_video_key(user_id: int, filename: str) -> str:
    """Return ``videos/<user>/<timestamp>-<random>.<ext>`` for an upload."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "mp4"
    return f"videos/{user_id}/{_unique_suffix()}.{ext}"


def generate_profile_image_key(user_id: int) -> str:
    """Return the ``profile-images/<user>/<timestamp>-<random>`` prefix shared by an upload's variants."""
    return f"profile-images/{user_id}/{_unique_suffix()}"


class StorageService:
    """Thin wrapper over a boto3 S3 client."""

    def __init__(self, client: Any | None = None, bucket: str | None = None) -> None:
        self.bucket = bucket if bucket is not None else settings.aws_s3_bucket
        self._client = client

    @property
    def configured(self) -> bool:
        if self._client is not None:
            return bool(self.bucket)
        return settings.storage_configured

    def _s3(self) -> Any:
        if not self.configured:
            raise ServiceUnavailableError("AWS S3 is not configured. Please set up AWS credentials.")
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=settings.aws_region,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
            )
        return self._client

    def public_url(self, key: str) -> str:
        if settings.aws_cloudfront_url:
            return f"{settings.aws_cloudfront_url.rstrip('/')}/{key}"
        return f"https://{self.bucket}.s3.{settings.aws_region}.amazonaws.com/{key}"

    def presign_upload(
        self,
        key: str,
        content_type: str,
        expires_in: int = PRESIGNED_URL_TTL_SECONDS,
    ) -> PresignedUpload:
        """Return a presigned PUT URL the browser can upload to directly."""
        s3 = self._s3()
        try:
            url = s3.generate_presigned_url(
                ClientMethod="put_object",
                Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Failed to presign upload for %s", key)
            raise ServiceUnavailableError("Failed to generate upload URL") from exc
        return PresignedUpload(upload_url=url, key=key, expires_in=expires_in)

    def put_object(self, key: str, body: bytes, content_type: str) -> str:
        """Upload ``body`` and return its public URL."""
        s3 = self._s3()
        try:
            s3.put_object(Bucket=self.bucket, Key=key, Body=body, ContentType=content_type)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Failed to upload %s", key)
            raise ServiceUnavailableError("Failed to upload file") from exc
        return self.public_url(key)


_storage_service: StorageService | None = None


def get_storage_service() -> StorageService:
    """Return the process-wide storage service."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
