"""Random chatter for the `markov` command, trained on passive channel lines."""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Iterable, Optional

import markovify

MARKOV_FILE = "markov.json"

# Oldest lines fall out once the corpus is this long
MAX_CORPUS_LINES = 5000
STATE_SIZE = 1
NOTHING_TO_SAY = "I have nothing to say yet."


class MarkovGenerator:
    """Word-chain generator; the model is rebuilt lazily after new input."""

    def __init__(self, lines: Optional[Iterable[str]] = None, max_lines: int = MAX_CORPUS_LINES):
        self.lines: Deque[str] = deque(maxlen=max_lines)
        for line in lines or ():
            self.feed(line)
        self._model: Optional[markovify.NewlineText] = None

    def feed(self, text: str) -> None:
        text = " ".join((text or "").split())
        if text:
            self.lines.append(text)
            self._model = None

    def _build(self) -> Optional[markovify.NewlineText]:
        if self._model is None and self.lines:
            self._model = markovify.NewlineText(
                "\n".join(self.lines),
                state_size=STATE_SIZE,
                well_formed=False,
            )
        return self._model

    def generate(self) -> str:
        model = self._build()
        if model is None:
            return NOTHING_TO_SAY
        sentence = model.make_sentence(tries=50, test_output=False)
        return sentence or NOTHING_TO_SAY

    # ------------------
    # Persistence
    # ------------------

    def to_dict(self) -> dict[str, Any]:
        return {"lines": list(self.lines)}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "MarkovGenerator":
        return cls(str(line) for line in raw["lines"])
