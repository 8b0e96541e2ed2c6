"""
CNIC photo validation: allowed content types, file extensions and size.
"""

import re
from typing import Tuple

ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/heic",
    }
)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".heic"}

MAX_SIZE_IMAGE = 10 * 1024 * 1024

# Filename: alphanumeric, dots, hyphens, underscores. Reject path traversal.
_FILENAME_RE = re.compile(r"^[a-zA-Z0-9._-]{1,200}\.[a-zA-Z0-9]{1,10}$")


def _normalize_content_type(content_type: str) -> str:
    return content_type.strip().lower().split(";")[0].strip()


def validate_content_type(content_type: str | None) -> Tuple[bool, str | None]:
    """
    Validate content_type for uploads. Returns (valid, error_message).
    """
    if not content_type or not content_type.strip():
        return False, "content_type required"
    if _normalize_content_type(content_type) not in ALLOWED_IMAGE_TYPES:
        return False, f"content_type '{content_type}' not allowed for CNIC photos"
    return True, None


def validate_filename(filename: str | None) -> Tuple[bool, str | None]:
    """
    Validate filename extension and format. Returns (valid, error_message).
    """
    if not filename or not filename.strip():
        return False, "filename required"
    fn = filename.strip()
    if ".." in fn or "/" in fn or "\\" in fn:
        return False, "invalid filename"
    if not _FILENAME_RE.match(fn):
        return (
            False,
            "filename must be alphanumeric with valid extension (e.g. cnic.jpg)",
        )
    ext = "." + fn.rsplit(".", 1)[-1].lower()
    if ext not in IMAGE_EXTENSIONS:
        return False, f"extension {ext} not allowed for CNIC photos"
    return True, None


def validate_size(size_bytes: int | None) -> Tuple[bool, str | None]:
    if size_bytes is None:
        return True, None
    if size_bytes < 0:
        return False, "size_bytes must be non-negative"
    if size_bytes > MAX_SIZE_IMAGE:
        return False, f"file too large (max {MAX_SIZE_IMAGE // (1024 * 1024)}MB)"
    return True, None
