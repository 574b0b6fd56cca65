"""
File utility functions for verification documents.
"""
import os
import re
import time
from typing import Optional

from mediconnect.core.config import Settings, settings as default_settings
from mediconnect.core.exceptions import ValidationError


def sanitize_filename(filename: str) -> str:
    """Replace anything but letters, digits, dots and dashes with underscores."""
    return re.sub(r'[^a-zA-Z0-9.-]', '_', os.path.basename(filename))


def build_object_name(user_id: str, filename: str) -> str:
    """Storage object name ``<userId>/<epoch ms>_<sanitized name>``."""
    return f"{user_id}/{int(time.time() * 1000)}_{sanitize_filename(filename)}"


def validate_document(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    settings: Settings = default_settings
) -> None:
    """Check document size and type (JPG, PNG or PDF)."""
    if not filename:
        raise ValidationError("No file provided")

    if size > settings.MAX_DOCUMENT_SIZE:
        limit_mb = settings.MAX_DOCUMENT_SIZE // (1024 * 1024)
        raise ValidationError(f"File size exceeds {limit_mb}MB limit")

    _, ext = os.path.splitext(filename.lower())
    allowed_type = (content_type or "").lower() in settings.ALLOWED_DOCUMENT_TYPES
    allowed_ext = ext in [e.lower() for e in settings.ALLOWED_DOCUMENT_EXTENSIONS]
    if not allowed_type and not allowed_ext:
        raise ValidationError("Invalid file type. Only JPG, PNG, and PDF are allowed.")
