"""Prompt template loader.

Each ``get_*`` function loads a ``.txt`` template from this package
directory and substitutes placeholders.
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict

_DIR = os.path.dirname(__file__)

# Shared with the flashcard parser: the model answers with exactly this line
# when the material holds nothing worth a card.
NO_FLASHCARDS_SENTINEL = "No flashcards could be generated."


@lru_cache(maxsize=32)
def _load(filename: str) -> str:
    """Read a template file, caching the result."""
    with open(os.path.join(_DIR, filename), encoding="utf-8") as f:
        return f.read()


def _render(filename: str, subs: Dict[str, str]) -> str:
    """Load *filename* and apply all substitutions."""
    text = _load(filename)
    for key, val in subs.items():
        text = text.replace(key, val)
    return text


# ── Public helpers ────────────────────────────────────────


def get_flashcard_instruction() -> str:
    return _render("flashcard_instruction.txt", {
        "{{NO_FLASHCARDS_SENTINEL}}": NO_FLASHCARDS_SENTINEL,
    }).strip()


def get_notes_preamble() -> str:
    return "Here are some study notes:\n"


def get_transcript_preamble() -> str:
    return "Here are notes transcribed from audio:\n"
