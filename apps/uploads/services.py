"""Car image storage.

Files go through Django's ``default_storage`` under
``settings.UPLOAD_DIRECTORY`` and are served from ``MEDIA_URL``.
"""

from __future__ import annotations

import os
import time
import uuid
from typing import Any

import structlog
from django.conf import settings  # type: ignore
from django.core.files.storage import default_storage  # type: ignore
from django.utils.text import get_valid_filename  # type: ignore
from PIL import Image

logger = structlog.get_logger(__name__)

SVG_CONTENT_TYPE = "image/svg+xml"
BITMAP_FORMATS = {"JPEG", "PNG", "GIF", "WEBP", "BMP"}


class ImageValidationError(ValueError):
    pass


def validate_image(upload) -> None:  # type: ignore
    """Reject anything that is not a supported image within the size limit."""
    max_size = settings.UPLOAD_MAX_SIZE
    if upload.size > max_size:
        raise ImageValidationError(f"File is too large. Max size: {max_size / 1024 / 1024:.0f}MB.")

    content_type = (getattr(upload, "content_type", "") or "").lower()
    if content_type not in settings.UPLOAD_ALLOWED_CONTENT_TYPES:
        raise ImageValidationError(
            "Invalid file type. Allowed formats: JPEG, PNG, GIF, WebP, BMP, SVG."
        )

    try:
        if content_type == SVG_CONTENT_TYPE:
            head = upload.read(1024).decode("utf-8", errors="ignore").lower()
            if "<svg" not in head:
                raise ImageValidationError("Uploaded file is not a valid SVG image.")
            return
        try:
            with Image.open(upload) as img:
                img.verify()
                image_format = img.format
        except (OSError, SyntaxError, ValueError) as exc:
            raise ImageValidationError("Uploaded file is not a valid image.") from exc
        if image_format not in BITMAP_FORMATS:
            raise ImageValidationError(f"Unsupported image format: {image_format}.")
    finally:
        upload.seek(0)


def unique_filename(original_name: str) -> str:
    """``photo.jpg`` -> ``photo-1700000000000-1a2b3c4d.jpg``."""
    stem, ext = os.path.splitext(os.path.basename(original_name))
    stem = get_valid_filename(stem) or "image"
    suffix = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
    return f"{stem}-{suffix}{ext.lower()}"


def _storage_path(filename: str) -> str:
    return f"{settings.UPLOAD_DIRECTORY}/{filename}"


def store_image(upload, request=None) -> dict[str, Any]:  # type: ignore
    """Save an already validated upload and describe where it landed."""
    saved = default_storage.save(_storage_path(unique_filename(upload.name)), upload)
    url = default_storage.url(saved)
    info = {
        "filename": os.path.basename(saved),
        "original_name": upload.name,
        "size": upload.size,
        "mimetype": upload.content_type,
        "url": url,
        "full_url": request.build_absolute_uri(url) if request is not None else url,
    }
    logger.info("upload.stored", filename=info["filename"], size=info["size"], mimetype=info["mimetype"])
    return info


def delete_image(filename: str) -> bool:
    """Remove a stored image; ``False`` when there is nothing to remove."""
    if not filename or os.path.basename(filename) != filename or filename in {".", ".."}:
        return False
    path = _storage_path(filename)
    if not default_storage.exists(path):
        return False
    default_storage.delete(path)
    logger.info("upload.deleted", filename=filename)
    return True
