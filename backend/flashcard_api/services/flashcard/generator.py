"""Flashcard generation pipeline.

normalize → (transcribe) → build prompt → generate → parse

External adapters can be passed in so the pipeline runs against mocks.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from flashcard_api.services.flashcard.normalizer import Transcriber, normalize_and_build_prompt
from flashcard_api.services.flashcard.parser import ParseResult, parse_flashcards
from flashcard_api.services.flashcard.prompt import DetailLevel, PromptMessage
from flashcard_api.services.flashcard.submission import Submission
from flashcard_api.services.llm_service.llm import ModelConfig, generate
from flashcard_api.services.text_processing.transcription_service import transcribe

logger = logging.getLogger(__name__)

CompletionAdapter = Callable[[PromptMessage, Optional[ModelConfig]], Awaitable[str]]


async def generate_flashcards(
    submission: Submission,
    *,
    transcriber: Optional[Transcriber] = None,
    generator: Optional[CompletionAdapter] = None,
    config: Optional[ModelConfig] = None,
    image_detail: Optional[DetailLevel] = None,
) -> ParseResult:
    """Generate flashcards from one submission.

    Args:
        submission: Notes, image and/or voice note for this request.
        transcriber: Speech-to-text adapter, awaited only for audio input
            (default: the OpenAI transcription adapter).
        generator: Completion adapter returning the model's raw text
            (default: the OpenAI chat completion adapter).
        config: Model parameters (default: from settings).
        image_detail: Override for the image detail level.

    Returns:
        ParseResult: ordered flashcards; ``empty`` is a successful outcome.

    Raises:
        ValidationError: before any adapter is called, if nothing was submitted.
        TranscriptionError / GenerationError: surfaced unchanged, never retried.
    """
    transcriber = transcriber or transcribe
    generator = generator or generate

    prompt = await normalize_and_build_prompt(submission, transcriber, image_detail)
    raw_text = await generator(prompt, config)
    result = parse_flashcards(raw_text)

    if result.empty:
        logger.info("Model produced no flashcards")
    else:
        degenerate = sum(1 for c in result.flashcards if not c.question or not c.answer)
        logger.info("Parsed %d flashcards (%d incomplete)", len(result.flashcards), degenerate)
    return result
