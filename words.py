"""words.py

Word ledger: when each word was first and last seen in passive chatter, and
how often.

`describe()` renders elapsed time in a deliberately silly set of units, e.g.
"hello was used 12 times between 3.1 dog years ago and 2.0 punct ago".
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

import pytz

from utils.helpers import now_ts

WORDS_FILE = "words.json"

_SECOND = 1.0
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_YEAR = 365.25 * _DAY

# Ascending; the largest unit that fits the elapsed time is used
UNITS: tuple[tuple[str, float], ...] = (
    ("atoms", _SECOND / 376),
    ("microfortnight", _SECOND * 1.2096),
    ("moments", 90 * _SECOND),
    ("European swallow-hours per mile", 2.5 * _MINUTE),
    ("punct", 15 * _MINUTE),
    ("ghurry", 24 * _MINUTE),
    ("quadrants", 6 * _HOUR),
    ("nycthemeron", _DAY),
    ("quinzième", 15 * _DAY),
    ("dog years", 52 * _DAY),
    ("seasons", 0.25 * _YEAR),
    ("mileways", 5 * _YEAR),
)

# Anything older than the largest unit is printed as a year
MAX_RELATIVE = UNITS[-1][1]


def relative_time(ts: float, now: Optional[float] = None) -> str:
    """`"2.5 moments ago"`, or `"anno 2019"` outside the unit table's range."""
    now = now_ts() if now is None else now
    elapsed = float(now - ts)
    if elapsed <= MAX_RELATIVE:
        for name, unit in reversed(UNITS):
            if unit <= elapsed:
                return f"{elapsed / unit:.1f} {name} ago"
    year = datetime.fromtimestamp(ts, tz=pytz.utc).year
    return f"anno {year}"


@dataclass
class WordEntry:
    first_use: int
    last_use: int
    count: int = 1


class WordLedger:
    """Usage history per lowercased word."""

    def __init__(self, data: Optional[Dict[str, WordEntry]] = None):
        self.data: Dict[str, WordEntry] = data or {}

    def record(self, words: Iterable[str], now: Optional[int] = None) -> None:
        now = now_ts() if now is None else now
        for w in words:
            w = w.lower()
            entry = self.data.get(w)
            if entry is None:
                self.data[w] = WordEntry(first_use=now, last_use=now, count=1)
            else:
                entry.count += 1
                entry.last_use = now

    def get(self, word: str) -> Optional[WordEntry]:
        return self.data.get(word.lower())

    def describe(self, word: str, now: Optional[int] = None) -> Optional[str]:
        entry = self.get(word)
        if entry is None:
            return None
        first = relative_time(entry.first_use, now)
        if entry.count == 1:
            return f"{word} was used once {first}"
        last = relative_time(entry.last_use, now)
        if entry.count == 2:
            return f"{word} was used twice: {first} and {last}"
        return f"{word} was used {entry.count} times between {first} and {last}"

    def __len__(self) -> int:
        return len(self.data)

    # ------------------
    # Persistence
    # ------------------

    def to_dict(self) -> Dict[str, Any]:
        return {w: asdict(e) for w, e in self.data.items()}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "WordLedger":
        return cls({
            str(w): WordEntry(
                first_use=int(e["first_use"]),
                last_use=int(e["last_use"]),
                count=max(1, int(e["count"])),
            )
            for w, e in raw.items()
        })
