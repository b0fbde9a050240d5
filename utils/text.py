"""Text helpers for chat lines."""

from __future__ import annotations

import re
from typing import Iterator

# Unicode word tokens; apostrophes and hyphens inside a word keep it whole
_WORD_RE = re.compile(r"\w+(?:['’-]\w+)*")

ELLIPSIS = " ..."


def iter_words(text: str | None) -> Iterator[str]:
    """Yield the lowercased word tokens of a chat line."""
    for match in _WORD_RE.finditer(text or ""):
        yield match.group(0).lower()


def first_line(text: str | None) -> str:
    """First non-empty line of `text`, stripped."""
    for line in (text or "").splitlines():
        line = line.strip()
        if line:
            return line
    return ""


def truncate_at_word(text: str, max_chars: int, marker: str = ELLIPSIS) -> str:
    """Cut `text` so that the result including `marker` fits in `max_chars`.

    The cut is only ever made at a space; a word is never split. Text that
    already fits is returned unchanged.
    """
    text = text.strip()
    if len(text) <= max_chars:
        return text
    budget = max(0, max_chars - len(marker))
    # A space right after the window still counts as a clean boundary
    window = text[:budget + 1]
    idx = window.rfind(" ")
    cut = text[:idx].rstrip() if idx > 0 else ""
    return cut + marker if cut else marker.strip()
