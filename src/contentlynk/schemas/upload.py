# src/contentlynk/schemas/upload.py
"""Upload request and response schemas."""

from pydantic import BaseModel, Field


class PresignedVideoRequest(BaseModel):
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str
    file_size: int | None = Field(None, ge=0, description="Size in bytes, when known")


class PresignedVideoResponse(BaseModel):
    upload_url: str
    key: str
    expires_in: int


class ProfileImageResponse(BaseModel):
    success: bool = True
    avatar_url: str
    thumbnail_url: str
    size: int = Field(..., description="Bytes in the stored full-size image")
    remaining_uploads: int
