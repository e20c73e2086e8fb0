"""Decoding, validation and resizing of uploaded profile images.

Uploads are fully decoded before anything is stored, so truncated or
mislabelled files are rejected. Accepted images are re-encoded as square
webp variants: a full-size avatar and a thumbnail.
"""

from __future__ import annotations

import io
import logging
import struct
from dataclasses import dataclass

from PIL import Image, ImageOps

from contentlynk.core.errors import InvalidRequestError

logger = logging.getLogger(__name__)

MIN_DIMENSION = 100
MAX_DIMENSION = 5000

FULL_SIZE = 800
FULL_QUALITY = 90
THUMBNAIL_SIZE = 100
THUMBNAIL_QUALITY = 80

WEBP_CONTENT_TYPE = "image/webp"

_CONTENT_TYPES = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}

_DECODE_ERRORS = (OSError, SyntaxError, ValueError, EOFError, struct.error, Image.DecompressionBombError)


@dataclass(frozen=True)
class ImageVariant:
    data: bytes
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ProfileImageVariants:
    full: ImageVariant
    thumbnail: ImageVariant


def open_image(data: bytes, declared_type: str) -> Image.Image:
    """Decode ``data`` and check it against the declared type and dimension bounds.

    Raises:
        InvalidRequestError: the bytes are not a decodable image, do not
            match ``declared_type`` or fall outside the allowed dimensions.
    """
    try:
        with Image.open(io.BytesIO(data)) as unverified:
            unverified.verify()
        # verify() leaves the image unusable; decode again for real.
        image = Image.open(io.BytesIO(data))
        image.load()
    except _DECODE_ERRORS as exc:
        logger.info("Rejected undecodable image upload: %s", exc)
        raise InvalidRequestError("Invalid or corrupted image file") from exc

    if _CONTENT_TYPES.get(image.format or "") != declared_type:
        raise InvalidRequestError("Invalid image")

    width, height = image.size
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        raise InvalidRequestError(f"Image too small. Minimum dimensions: {MIN_DIMENSION}x{MIN_DIMENSION}px")
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise InvalidRequestError(f"Image too large. Maximum dimensions: {MAX_DIMENSION}x{MAX_DIMENSION}px")
    return image


def _square_webp(image: Image.Image, size: int, quality: int) -> ImageVariant:
    # Centre crop to a square, never enlarging past the source.
    side = min(size, image.width, image.height)
    square = ImageOps.fit(image, (side, side), method=Image.Resampling.LANCZOS)
    buffer = io.BytesIO()
    square.save(buffer, format="WEBP", quality=quality)
    return ImageVariant(data=buffer.getvalue(), width=side, height=side)


def process_profile_image(data: bytes, declared_type: str) -> ProfileImageVariants:
    """Validate an upload and render its full-size and thumbnail webp variants."""
    image = ImageOps.exif_transpose(open_image(data, declared_type))
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if image.has_transparency_data else "RGB")

    variants = ProfileImageVariants(
        full=_square_webp(image, FULL_SIZE, FULL_QUALITY),
        thumbnail=_square_webp(image, THUMBNAIL_SIZE, THUMBNAIL_QUALITY),
    )
    logger.debug(
        "Rendered profile image %sx%s -> %s bytes (thumbnail %s bytes)",
        image.width,
        image.height,
        variants.full.size,
        variants.thumbnail.size,
    )
    return variants
