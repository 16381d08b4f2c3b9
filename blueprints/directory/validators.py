from __future__ import annotations

from models import SECTION_LETTERS


def ensure_section_letter(letter: str) -> str:
    if letter not in SECTION_LETTERS:
        raise ValueError(f"section letter must be one of {', '.join(SECTION_LETTERS)}")
    return letter
