"""Everything the dispatch path mutates, owned by one object."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from evaluator import Evaluator
from markov import MARKOV_FILE, MarkovGenerator
from memos import MEMOS_FILE, MemoStore
from persistence import load_slot, save_slot
from uptime import UptimeTracker
from urbandict import UrbanDictionary
from utils.logging import DEFAULT_TZ, log
from words import WORDS_FILE, WordLedger


@dataclass
class BotState:
    data_dir: Path
    memos: MemoStore = field(default_factory=MemoStore)
    words: WordLedger = field(default_factory=WordLedger)
    generator: MarkovGenerator = field(default_factory=MarkovGenerator)
    evaluator: Evaluator = field(default_factory=Evaluator)
    dictionary: UrbanDictionary = field(default_factory=UrbanDictionary)
    tracker: UptimeTracker = field(default_factory=lambda: UptimeTracker.start(DEFAULT_TZ))

    @classmethod
    def load(cls, data_dir: str | Path, dictionary: Optional[UrbanDictionary] = None) -> "BotState":
        """Read the three durable slots under `data_dir`; missing ones start empty."""
        data_dir = Path(data_dir)
        state = cls(
            data_dir=data_dir,
            memos=load_slot(data_dir / MEMOS_FILE, MemoStore.from_dict, MemoStore),
            words=load_slot(data_dir / WORDS_FILE, WordLedger.from_dict, WordLedger),
            generator=load_slot(data_dir / MARKOV_FILE, MarkovGenerator.from_dict, MarkovGenerator),
        )
        if dictionary is not None:
            state.dictionary = dictionary
        log(
            f"[Store] Loaded {len(state.memos.mailboxes)} mailboxes, "
            f"{len(state.words)} words, {len(state.generator.lines)} corpus lines."
        )
        return state

    def save(self) -> bool:
        """Flush every durable slot. Returns False if any write failed."""
        results = [
            save_slot(self.data_dir / MEMOS_FILE, self.memos.to_dict()),
            save_slot(self.data_dir / WORDS_FILE, self.words.to_dict()),
            save_slot(self.data_dir / MARKOV_FILE, self.generator.to_dict()),
        ]
        ok = all(results)
        log(f"[Store] State saved to {self.data_dir}" + ("" if ok else " (with errors)"))
        return ok
