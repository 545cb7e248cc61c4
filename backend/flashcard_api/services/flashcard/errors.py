"""Error taxonomy for the flashcard generation pipeline.

Every error carries the HTTP status the web layer should answer with, so
routes never have to re-classify a failure.
"""

from __future__ import annotations

from typing import Any, Optional


class PipelineError(Exception):
    """Base class for failures that terminate a generation request."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PipelineError):
    """No usable input was submitted. Client-fixable."""

    status_code = 400


class PayloadTooLargeError(PipelineError):
    """An uploaded file exceeds the configured size limit."""

    status_code = 413


class AccessDeniedError(PipelineError):
    """The access gate rejected the caller."""

    def __init__(self, reason: str):
        status_code = 403 if reason == "trial_expired" else 401
        super().__init__(reason, status_code)
        self.reason = reason


class TranscriptionError(PipelineError):
    """The speech-to-text backend failed. Never retried."""

    def __init__(self, detail: str, status_code: int = 500):
        super().__init__(detail, status_code)
        self.detail = detail


class GenerationError(PipelineError):
    """The completion backend failed. Never retried."""

    def __init__(self, status: int, body: Any):
        message = body if isinstance(body, str) else _message_from_body(body)
        super().__init__(message, status)
        self.status = status
        self.body = body


def _message_from_body(body: Any) -> str:
    # OpenAI-style bodies: {"error": {"message": ...}} or {"message": ...}
    if isinstance(body, dict):
        err = body.get("error", body)
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str):
            return err
    return "Failed to generate flashcards."
