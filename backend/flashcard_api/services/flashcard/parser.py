"""Deterministic parser for the model's ``Q:/A:`` flashcard text.

The parser is lenient: a malformed block becomes a partially-empty card
instead of failing the whole request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from flashcard_api.prompts import NO_FLASHCARDS_SENTINEL

_QUESTION_PREFIX = "Q: "
_ANSWER_PREFIX = "A: "


@dataclass(frozen=True)
class Flashcard:
    question: str
    answer: str

    def to_dict(self) -> Dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass(frozen=True)
class ParseResult:
    flashcards: List[Flashcard] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return len(self.flashcards) == 0


def _strip_prefix(line: str, prefix: str) -> str:
    if line.startswith(prefix):
        line = line[len(prefix):]
    return line.strip()


def parse_flashcards(raw_text: str) -> ParseResult:
    """Split *raw_text* into ordered flashcards.

    Blocks are separated by a blank line. In each block the first line is
    the question and the second the answer; further lines are ignored.
    """
    if raw_text.strip() == NO_FLASHCARDS_SENTINEL:
        return ParseResult([])

    cards = []
    for segment in raw_text.split("\n\n"):
        if not segment:
            continue
        lines = segment.split("\n")
        question = _strip_prefix(lines[0], _QUESTION_PREFIX)
        answer = _strip_prefix(lines[1], _ANSWER_PREFIX) if len(lines) > 1 else ""
        cards.append(Flashcard(question=question, answer=answer))
    return ParseResult(cards)
