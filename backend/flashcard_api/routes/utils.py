"""
Shared route utilities.

Centralises request-to-submission conversion and disconnect handling for
the generation route.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from fastapi import Request, UploadFile

from flashcard_api.services.file_validator import validate_upload
from flashcard_api.services.flashcard.submission import Submission

logger = logging.getLogger(__name__)

T = TypeVar("T")

# How often an in-flight generation checks whether the caller went away
DISCONNECT_POLL_SECONDS = 0.5


class ClientDisconnected(Exception):
    """The caller closed the connection before the pipeline finished."""


# ── Submission Helpers ────────────────────────────────────────


async def read_submission(notes: Optional[str], upload: Optional[UploadFile]) -> Submission:
    """Build a Submission from multipart form fields.

    Empty uploads count as absent. The upload is classified as image or
    audio by MIME sniffing.

    Raises:
        PayloadTooLargeError / ValidationError from upload validation.
    """
    if upload is None or (not upload.filename and not upload.size):
        return Submission(notes=notes)

    # Starlette reports the spooled size; check before pulling bytes into memory
    if upload.size:
        validate_upload(upload.filename, upload.content_type, upload.size)

    data = await upload.read()
    if not data:
        return Submission(notes=notes)

    kind, mime_type = validate_upload(upload.filename, upload.content_type, len(data))
    if kind == "audio":
        return Submission(notes=notes, audio=data, audio_mime_type=mime_type)
    return Submission(notes=notes, image=data, image_mime_type=mime_type)


# ── Cancellation ──────────────────────────────────────────────


async def run_until_disconnected(
    request: Request,
    work: Awaitable[T],
    poll_interval: float = DISCONNECT_POLL_SECONDS,
) -> T:
    """Await *work*, cancelling it if the client disconnects first.

    Raises:
        ClientDisconnected: the connection dropped; *work* was cancelled.
    """
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.warning("Client disconnected, cancelling in-flight generation")
                task.cancel()
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()
