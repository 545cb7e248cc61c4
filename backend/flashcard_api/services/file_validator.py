"""Upload validation for the generation endpoint.

Only images and voice notes are accepted. The kind is sniffed from the
declared content type, falling back to the filename extension when the
client sends a generic type. Bytes stay in memory for one request, so the
size is capped at settings.MAX_UPLOAD_SIZE_MB.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Literal, Optional, Tuple

from flashcard_api.core.config import settings
from flashcard_api.services.flashcard.errors import PayloadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

MediaKind = Literal["image", "audio"]

_GENERIC_TYPES = frozenset({"", "application/octet-stream", "binary/octet-stream"})

# Voice notes recorded in the browser are often labelled video/webm
_AUDIO_CONTAINER_TYPES = frozenset({"video/webm", "video/ogg", "application/ogg"})

_EXTENSION_TYPES = {
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".oga": "audio/ogg",
    ".m4a": "audio/mp4",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".flac": "audio/flac",
    ".webp": "image/webp",
}


def _base_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def sniff_mime_type(filename: Optional[str], content_type: Optional[str]) -> str:
    """Resolve the effective MIME type of an upload."""
    declared = _base_type(content_type)
    if declared not in _GENERIC_TYPES:
        return declared

    ext = Path(filename or "").suffix.lower()
    guessed = _EXTENSION_TYPES.get(ext) or mimetypes.guess_type(f"upload{ext}")[0]
    return guessed or "application/octet-stream"


def classify_mime_type(mime_type: str) -> Optional[MediaKind]:
    if mime_type.startswith("image/"):
        return "image"
    if mime_type.startswith("audio/") or mime_type in _AUDIO_CONTAINER_TYPES:
        return "audio"
    return None


def validate_file_size(file_size: int) -> None:
    if file_size > settings.max_upload_bytes:
        size_mb = file_size / (1024 * 1024)
        raise PayloadTooLargeError(
            f"File too large: {size_mb:.2f} MB exceeds {settings.MAX_UPLOAD_SIZE_MB} MB limit"
        )


# ── Public entry point ────────────────────────────────────────

def validate_upload(
    filename: Optional[str],
    content_type: Optional[str],
    file_size: int,
) -> Tuple[MediaKind, str]:
    """Validate an uploaded study file.

    Returns (kind, mime_type) on success.
    Raises PayloadTooLargeError or ValidationError on failure.
    """
    validate_file_size(file_size)
    mime_type = sniff_mime_type(filename, content_type)
    kind = classify_mime_type(mime_type)
    if kind is None:
        raise ValidationError(
            f"Unsupported file type: {mime_type}. Upload an image or an audio recording."
        )

    logger.info("Upload accepted: %s (%s, %s, %d bytes)", filename, kind, mime_type, file_size)
    return kind, mime_type
