"""Generation backend adapter with explicit timeout and token limits.

Usage:
    from flashcard_api.services.llm_service.llm import ModelConfig, generate

    raw_text = await generate(prompt, ModelConfig.from_settings())

One call per request: no streaming, no retries. Parsing the returned text
is the flashcard parser's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from openai import APIStatusError, APITimeoutError, AsyncOpenAI, OpenAIError

from flashcard_api.core.config import settings
from flashcard_api.services.flashcard.errors import GenerationError
from flashcard_api.services.flashcard.prompt import PromptMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelConfig:
    model: str = "gpt-4o"
    temperature: float = 0.7
    max_output_tokens: int = 1500
    timeout_seconds: float = 60.0

    @classmethod
    def from_settings(cls) -> "ModelConfig":
        return cls(
            model=settings.GENERATION_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_output_tokens=settings.LLM_MAX_TOKENS,
            timeout_seconds=settings.GENERATION_TIMEOUT_SECONDS,
        )


def get_client(timeout: float, api_key: Optional[str] = None) -> AsyncOpenAI:
    """Build a request-scoped OpenAI client; retries are disabled."""
    return AsyncOpenAI(
        api_key=api_key or settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=timeout,
        max_retries=0,
    )


async def generate(prompt: PromptMessage, config: Optional[ModelConfig] = None) -> str:
    """Run one chat completion for *prompt* and return the trimmed text.

    Raises:
        GenerationError: status + body when the backend answers with an error,
            504/"timeout" on timeout, 500/"internal" otherwise.
    """
    config = config or ModelConfig.from_settings()

    try:
        async with get_client(config.timeout_seconds) as client:
            completion = await client.chat.completions.create(
                model=config.model,
                messages=prompt.to_messages(),
                temperature=config.temperature,
                max_tokens=config.max_output_tokens,
            )
    except APITimeoutError as exc:
        logger.error("Generation backend timed out after %.0fs: %s", config.timeout_seconds, exc)
        raise GenerationError(504, "timeout") from exc
    except APIStatusError as exc:
        logger.error("Generation backend returned %d: %s", exc.status_code, exc.message)
        raise GenerationError(exc.status_code, exc.body if exc.body is not None else exc.message) from exc
    except OpenAIError as exc:
        logger.error("Generation backend call failed: %s", exc)
        raise GenerationError(500, "internal") from exc

    if not completion.choices:
        logger.error("Generation backend returned no choices")
        raise GenerationError(500, "internal")

    content = completion.choices[0].message.content or ""
    text = content.strip()
    logger.info(
        "Generation complete: model=%s chars=%d finish_reason=%s",
        config.model, len(text), completion.choices[0].finish_reason,
    )
    return text
