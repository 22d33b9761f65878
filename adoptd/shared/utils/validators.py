# 📄 File: adoptd/shared/utils/validators.py
# 🧭 Purpose (Layman Explanation):
# Checks that what people type or upload is acceptable before we bother the server,
# like making sure a post has a title and a photo is a real picture format.
# 🧪 Purpose (Technical Summary):
# Input validation helpers run before any remote call: required text fields, the
# inline image media-type allow-list shared by forum uploads and the AI endpoint,
# upload size limits and filename sanitizing for storage paths.
# 🔗 Dependencies:
# re, pathlib, typing, adoptd.shared.core.exceptions
# 🔄 Connected Modules / Calls From:
# Forum service (post/comment creation), plant scanner, profile avatar upload, storage

import re
from pathlib import Path
from typing import List, Optional

from adoptd.shared.core.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    ValidationError,
)

# Media types the generative endpoint accepts inline
ALLOWED_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/webp')
ALLOWED_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}

MAX_TITLE_LENGTH = 200
MAX_CONTENT_LENGTH = 10000


class ValidationResult:
    """Result object for validation operations"""
    def __init__(self, is_valid: bool, errors: List[str] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str):
        """Add validation error"""
        self.errors.append(error)
        self.is_valid = False


def validate_text_content(content: Optional[str], min_length: int = 1,
                          max_length: int = MAX_CONTENT_LENGTH) -> ValidationResult:
    """
    Validate text content for length.

    Whitespace-only content counts as empty.
    """
    result = ValidationResult(True)

    if not content or not isinstance(content, str) or not content.strip():
        if min_length > 0:
            result.add_error("Content is required")
        return result

    content = content.strip()

    if len(content) < min_length:
        result.add_error(f"Content must be at least {min_length} characters long")

    if len(content) > max_length:
        result.add_error(f"Content must be no more than {max_length} characters long")

    return result


def require_text(value: Optional[str], field: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Return the stripped value or raise ValidationError for an empty/oversized field."""
    result = validate_text_content(value, max_length=max_length)
    if not result.is_valid:
        raise ValidationError(
            message=f"{field}: {result.errors[0]}",
            field=field,
            constraint="required",
        )
    return value.strip()


def ensure_image_type(content_type: Optional[str], filename: Optional[str] = None) -> str:
    """
    Reject any media type outside the inline image allow-list.

    Returns the normalized media type.
    """
    normalized = (content_type or '').split(';')[0].strip().lower()
    if normalized == 'image/jpg':
        normalized = 'image/jpeg'

    if normalized not in ALLOWED_IMAGE_TYPES:
        raise InvalidFileTypeError(
            message="Only JPEG, PNG and WebP images are allowed",
            filename=filename,
            expected_types=list(ALLOWED_IMAGE_TYPES),
            actual_type=content_type,
        )
    return normalized


def validate_image_upload(content_type: Optional[str], size: int, max_size: int,
                          filename: Optional[str] = None) -> str:
    """Media type first, then size; both run before any upload or quota use."""
    media_type = ensure_image_type(content_type, filename)

    if filename:
        extension = Path(filename).suffix.lower()
        if extension and extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise InvalidFileTypeError(
                message=f"Image file extension '{extension}' is not allowed",
                filename=filename,
                expected_types=sorted(ALLOWED_IMAGE_EXTENSIONS),
            )

    if size <= 0:
        raise ValidationError("File is empty", field="file")
    if size > max_size:
        raise FileTooLargeError(size=size, max_size=max_size)

    return media_type


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename for safe storage

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    if not filename:
        return "unnamed_file"

    filename = re.sub(r'[^\w\-_\.\s]', '', filename)
    filename = re.sub(r'\s+', '_', filename)
    filename = filename.strip('._')

    if len(filename) > 100:
        name, ext = Path(filename).stem[:95], Path(filename).suffix
        filename = f"{name}{ext}"

    return filename or "unnamed_file"
