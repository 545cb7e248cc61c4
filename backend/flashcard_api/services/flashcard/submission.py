"""Submission values and primary-input selection.

A request may carry notes, an image and a voice note at the same time, but
only one of them feeds the prompt. The precedence is fixed:
audio > notes text > image.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from flashcard_api.services.flashcard.errors import ValidationError


@dataclass(frozen=True)
class Submission:
    """Caller-provided material for one generation request."""
    notes: Optional[str] = None
    image: Optional[bytes] = None
    image_mime_type: Optional[str] = None
    audio: Optional[bytes] = None
    audio_mime_type: Optional[str] = None

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())


@dataclass(frozen=True)
class TextInput:
    notes: str


@dataclass(frozen=True)
class ImageInput:
    data: bytes
    mime_type: str


@dataclass(frozen=True)
class AudioInput:
    data: bytes
    mime_type: str


PrimaryInput = Union[TextInput, ImageInput, AudioInput]


def select_primary_input(submission: Submission) -> PrimaryInput:
    """Pick the single content source the prompt is built from.

    Raises:
        ValidationError: when no notes, image or audio were supplied.
    """
    if submission.audio:
        return AudioInput(submission.audio, submission.audio_mime_type or "audio/webm")
    if submission.has_notes:
        return TextInput(submission.notes.strip())
    if submission.image:
        return ImageInput(submission.image, submission.image_mime_type or "image/png")
    raise ValidationError("no input provided")
