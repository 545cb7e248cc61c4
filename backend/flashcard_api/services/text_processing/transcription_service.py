"""Speech-to-text adapter for recorded voice notes."""

import logging
import mimetypes
from typing import Optional

from openai import APIStatusError, APITimeoutError, OpenAIError

from flashcard_api.core.config import settings
from flashcard_api.services.flashcard.errors import TranscriptionError
from flashcard_api.services.llm_service.llm import get_client

logger = logging.getLogger(__name__)

# Browsers record voice notes as webm/ogg; mimetypes does not know all of them
_AUDIO_EXTENSIONS = {
    "audio/webm": "webm",
    "video/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/flac": "flac",
    "audio/x-flac": "flac",
}


def audio_filename(mime_type: str) -> str:
    """Filename hint for the backend, which sniffs the format from the extension."""
    base = mime_type.split(";", 1)[0].strip().lower()
    ext = _AUDIO_EXTENSIONS.get(base)
    if ext is None:
        guessed = mimetypes.guess_extension(base)
        ext = guessed.lstrip(".") if guessed else "webm"
    return f"voice-note.{ext}"


async def transcribe(
    audio_bytes: bytes,
    mime_type: str,
    model: Optional[str] = None,
) -> str:
    """Transcribe *audio_bytes* and return the recognized text verbatim.

    Not retried: a second attempt would be billed again and does not fix
    format errors.

    Raises:
        TranscriptionError: on any backend failure ("timeout" on timeout).
    """
    model = model or settings.TRANSCRIPTION_MODEL
    filename = audio_filename(mime_type)
    logger.info("Starting transcription of %d bytes (%s) with %s", len(audio_bytes), mime_type, model)

    try:
        async with get_client(
            settings.TRANSCRIPTION_TIMEOUT_SECONDS, api_key=settings.TRANSCRIPTION_API_KEY
        ) as client:
            result = await client.audio.transcriptions.create(
                model=model,
                file=(filename, audio_bytes, mime_type),
            )
    except APITimeoutError as exc:
        logger.error("Transcription timed out: %s", exc)
        raise TranscriptionError("timeout", 504) from exc
    except APIStatusError as exc:
        logger.error("Transcription backend returned %d: %s", exc.status_code, exc.message)
        raise TranscriptionError(exc.message, exc.status_code) from exc
    except OpenAIError as exc:
        logger.error("Audio transcription failed: %s", exc)
        raise TranscriptionError(str(exc)) from exc

    text = result.text
    logger.info("Transcription complete: %d chars", len(text))
    return text
