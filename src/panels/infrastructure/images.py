"""Image upload helpers for floor plans and feedback screenshots."""

from __future__ import annotations

import base64

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"

MAX_IMAGE_BYTES = 10 * 1024 * 1024


class UnsupportedImageError(ValueError):
    """Raised for uploads that are not PNG or JPEG images."""


def detect_image_type(content: bytes) -> str:
    """Return the MIME type of PNG or JPEG bytes.

    Raises:
        UnsupportedImageError: For any other content.
    """
    if content.startswith(PNG_SIGNATURE):
        return "image/png"
    if content.startswith(JPEG_SIGNATURE):
        return "image/jpeg"
    raise UnsupportedImageError("Only .png and .jpg images are supported")


def to_data_url(content: bytes) -> str:
    """Encode image bytes as a base64 ``data:`` URL.

    Example:
        >>> to_data_url(PNG_SIGNATURE)[:22]
        'data:image/png;base64,'
    """
    if not content:
        raise UnsupportedImageError("Image is empty")
    if len(content) > MAX_IMAGE_BYTES:
        raise UnsupportedImageError(
            f"Image is larger than {MAX_IMAGE_BYTES // (1024 * 1024)} MB"
        )
    mime = detect_image_type(content)
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime};base64,{encoded}"
