"""Prompt message model and builder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Union

from flashcard_api.prompts import get_flashcard_instruction

DetailLevel = Literal["low", "high"]


@dataclass(frozen=True)
class TextPart:
    value: str
    kind: Literal["text"] = "text"

    def to_wire(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.value}


@dataclass(frozen=True)
class ImagePart:
    data_uri: str
    detail_level: DetailLevel = "low"
    kind: Literal["image"] = "image"

    def to_wire(self) -> Dict[str, Any]:
        return {
            "type": "image_url",
            "image_url": {"url": self.data_uri, "detail": self.detail_level},
        }


ContentPart = Union[TextPart, ImagePart]


@dataclass
class PromptMessage:
    """Ordered content parts of the single user message sent to the model."""
    parts: List[ContentPart] = field(default_factory=list)

    def to_messages(self) -> List[Dict[str, Any]]:
        """Render as a chat-completions ``messages`` list."""
        return [{"role": "user", "content": [p.to_wire() for p in self.parts]}]


def build_prompt(parts: List[ContentPart]) -> PromptMessage:
    """Append the fixed output-format instruction to the primary content.

    The instruction is a hard contract with ``parse_flashcards``: cards are
    two lines (``Q:``/``A:``) separated by a blank line.
    """
    return PromptMessage(parts=[*parts, TextPart(get_flashcard_instruction())])
