"""
Utility functions for image references
Includes helpers for data URLs, base64 decoding and format sniffing
"""

import re
import base64
import binascii
from io import BytesIO
from PIL import Image, UnidentifiedImageError
from typing import Optional, Tuple

from xeriscape_api.config import logger

DATA_URL_PATTERN = re.compile(r"data:image/([a-zA-Z0-9.+-]+);base64,(.+)", re.DOTALL)
SUPPORTED_REFERENCE_FORMATS = ("png", "jpeg", "webp", "gif")


def is_base64_image_url(url: str) -> bool:
    """
    Check if the URL is a base64 encoded image

    Args:
        url: String URL to check

    Returns:
        True if the URL is a base64 encoded image
    """
    return url.startswith("data:image/")


def is_image_reference(value: str) -> bool:
    """True for http(s) URLs and image data URLs, False for free text like an address"""
    value = value.strip()
    return value.lower().startswith(("http://", "https://")) or is_base64_image_url(value)


def decode_base64_image(image_base64: str) -> Tuple[bytes, Optional[str]]:
    """
    Decode a base64 image given either as a data URL or as bare base64

    Args:
        image_base64: data:image/...;base64,... URL or raw base64 text

    Returns:
        Tuple of (image_bytes, format_hint); format_hint is None for bare base64
    """
    value = image_base64.strip()
    format_hint = None
    if is_base64_image_url(value):
        match = DATA_URL_PATTERN.match(value)
        if not match:
            raise ValueError("Invalid base64 image URL format")
        format_hint, value = match.groups()
        format_hint = format_hint.lower()

    try:
        image_data = base64.b64decode(value, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 image data: {e}")

    if not image_data:
        raise ValueError("Empty image data")
    return image_data, format_hint


def detect_image_format(content_bytes: bytes) -> Optional[str]:
    """
    Detect image format by letting Pillow parse the header

    Args:
        content_bytes: Raw image bytes

    Returns:
        Format name (lowercase) or None if Pillow does not recognize it

    Raises:
        ValueError: if the image exceeds Pillow's decompression bomb limit
    """
    try:
        with Image.open(BytesIO(content_bytes)) as image:
            image.verify()
            return (image.format or "").lower() or None
    except Image.DecompressionBombError as e:
        raise ValueError(f"Reference image is too large: {e}")
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.info(f"Could not identify image data: {e}")
        return None


def to_data_url(image_data: bytes, image_format: str) -> str:
    """Encode raw image bytes as a data URL"""
    encoded = base64.b64encode(image_data).decode("utf-8")
    return f"data:image/{image_format};base64,{encoded}"


def prepare_reference_image(image_base64: str) -> str:
    """
    Validate an uploaded reference photo and normalize it to a data URL

    Args:
        image_base64: data URL or bare base64 sent by the client

    Returns:
        data URL whose mime type matches the actual image content

    Raises:
        ValueError: if the data is not a supported image
    """
    image_data, format_hint = decode_base64_image(image_base64)
    image_format = detect_image_format(image_data)
    if image_format not in SUPPORTED_REFERENCE_FORMATS:
        raise ValueError(
            f"Unsupported reference image format: {image_format or format_hint or 'unknown'}"
        )
    if format_hint and format_hint not in (image_format, "jpg"):
        logger.warning(
            f"Reference image declared as {format_hint} but contains {image_format}"
        )
    return to_data_url(image_data, image_format)
