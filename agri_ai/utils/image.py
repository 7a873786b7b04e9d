import io
import re
import base64
import binascii
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from agri_ai.config import ALLOWED_IMAGE_TYPES, MAX_IMAGE_BYTES
from agri_ai.errors import InvalidRequestError

logger = logging.getLogger(__name__)

_DATA_URI = re.compile(r'^data:(image/[\w.+-]+);base64,')

# Pillow format name -> MIME type
_PIL_FORMATS = {"JPEG": "image/jpeg", "PNG": "image/png", "WEBP": "image/webp"}


def get_image_mime(image_base64: str) -> Optional[str]:
    match = _DATA_URI.match(image_base64)
    return match.group(1) if match else None


def estimate_decoded_size(image_base64: str) -> int:
    """base64 is ~4/3 the size of the bytes it encodes"""
    payload = image_base64.split(",", 1)[1] if "," in image_base64 else image_base64
    return (len(payload) * 3) // 4


def validate_image_payload(image_base64: str) -> None:
    """
    Reject unsupported or oversized uploads before any model call.

    With a data URI prefix the declared MIME type is checked; without one the bytes
    are opened with Pillow to find the format.
    """
    mime_type = get_image_mime(image_base64)
    if mime_type and mime_type not in ALLOWED_IMAGE_TYPES:
        logger.warning(f"[Input] Rejected MIME type: {mime_type}")
        raise InvalidRequestError("Unsupported image format. Please upload JPEG, PNG, or WebP.")

    estimated_bytes = estimate_decoded_size(image_base64)
    if estimated_bytes > MAX_IMAGE_BYTES:
        logger.warning(f"[Input] Image too large: ~{estimated_bytes / 1024 / 1024:.1f} MB")
        raise InvalidRequestError("Image is too large. Please upload an image smaller than 10 MB.")

    if mime_type:
        return

    try:
        image_bytes = base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidRequestError("imageBase64 is not valid base64 data.")

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            image_format = img.format
    except (UnidentifiedImageError, OSError):
        raise InvalidRequestError("Could not read the uploaded image. Please upload JPEG, PNG, or WebP.")

    if _PIL_FORMATS.get(image_format) not in ALLOWED_IMAGE_TYPES:
        logger.warning(f"[Input] Rejected image format: {image_format}")
        raise InvalidRequestError("Unsupported image format. Please upload JPEG, PNG, or WebP.")
