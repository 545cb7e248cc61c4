"""Input normalization: turn a Submission into primary prompt content."""

from __future__ import annotations

import base64
import logging
from typing import Awaitable, Callable, List, Optional

from flashcard_api.core.config import settings
from flashcard_api.prompts import get_notes_preamble, get_transcript_preamble
from flashcard_api.services.flashcard.prompt import (
    ContentPart,
    DetailLevel,
    ImagePart,
    PromptMessage,
    TextPart,
    build_prompt,
)
from flashcard_api.services.flashcard.submission import (
    AudioInput,
    ImageInput,
    Submission,
    TextInput,
    select_primary_input,
)

logger = logging.getLogger(__name__)

Transcriber = Callable[[bytes, str], Awaitable[str]]


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


async def normalize_submission(
    submission: Submission,
    transcriber: Transcriber,
    image_detail: Optional[DetailLevel] = None,
) -> List[ContentPart]:
    """Produce the primary content parts for *submission*.

    Audio is transcribed first; the transcriber is awaited only when the
    audio branch wins.

    Raises:
        ValidationError: nothing usable was submitted.
        TranscriptionError: propagated unchanged from *transcriber*.
    """
    primary = select_primary_input(submission)

    if isinstance(primary, AudioInput):
        logger.info("Normalizing audio input (%d bytes, %s)", len(primary.data), primary.mime_type)
        text = await transcriber(primary.data, primary.mime_type)
        return [TextPart(get_transcript_preamble() + text)]

    if isinstance(primary, TextInput):
        logger.info("Normalizing text input (%d chars)", len(primary.notes))
        return [TextPart(get_notes_preamble() + primary.notes)]

    if isinstance(primary, ImageInput):
        logger.info("Normalizing image input (%d bytes, %s)", len(primary.data), primary.mime_type)
        detail = image_detail or settings.IMAGE_DETAIL
        return [ImagePart(to_data_uri(primary.data, primary.mime_type), detail)]

    raise TypeError(f"Unhandled input type: {type(primary).__name__}")


async def normalize_and_build_prompt(
    submission: Submission,
    transcriber: Transcriber,
    image_detail: Optional[DetailLevel] = None,
) -> PromptMessage:
    parts = await normalize_submission(submission, transcriber, image_detail)
    return build_prompt(parts)
