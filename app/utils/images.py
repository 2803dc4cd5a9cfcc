"""
utils/images.py

Property images arrive inline as base64 data URLs
(`data:image/png;base64,iVBOR...`) and are stored exactly as sent.
This module only checks that each one is a real, reasonably sized image.
"""

import base64
import binascii
import re

from app.core.config import settings

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif"}

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.DOTALL)


def max_image_size_bytes() -> int:
    return settings.MAX_IMAGE_SIZE_MB * 1024 * 1024


def validate_image_data_url(value: str) -> str:
    """
    Return the data URL unchanged if it is an allowed, decodable image.
    Raises ValueError otherwise (surfaced as a 400 by the schema layer).
    """
    if not isinstance(value, str):
        raise ValueError("Image must be a data URL string")

    match = _DATA_URL_RE.match(value.strip())
    if not match:
        raise ValueError("Image must be a base64 data URL")

    mime = match.group("mime").lower()
    if mime not in ALLOWED_IMAGE_TYPES:
        raise ValueError(f"Unsupported image type '{mime}'. Please upload a JPEG, PNG, WebP or GIF image.")

    # Cheap size check before decoding: 4 base64 chars -> 3 bytes
    data = match.group("data")
    if len(data) * 3 // 4 > max_image_size_bytes():
        raise ValueError(f"Image exceeds {settings.MAX_IMAGE_SIZE_MB}MB limit")

    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Image data is not valid base64")

    return value.strip()
