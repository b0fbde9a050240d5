"""persistence.py

Durable slots: one JSON file per store.

- `load_slot()` never fails: a missing, unreadable or malformed file yields
  the store's default value (and a log line).
- `save_slot()` writes to a temp file and swaps it in, so a crash mid-write
  leaves the previous snapshot intact.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, TypeVar

from utils.errors import log_error
from utils.logging import log

T = TypeVar("T")


def load_slot(path: str | Path, decode: Callable[[Any], T], default: Callable[[], T]) -> T:
    """Read `path` and turn its JSON payload into a store via `decode`."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return decode(raw)
    except FileNotFoundError:
        log(f"[Store] {path.name} not found, starting empty.")
    except (OSError, ValueError, TypeError, KeyError, AttributeError) as e:
        # Corrupt or foreign snapshot; keep the file around for inspection
        log(f"[Store] Could not load {path}: {e!r}, starting empty.")
    return default()


def save_slot(path: str | Path, payload: Any) -> bool:
    """Write `payload` as JSON to `path`. Returns False if the write failed."""
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=1)
        os.replace(tmp, path)
    except (OSError, TypeError, ValueError) as e:
        log_error(f"[Store] Failed to save {path}", e)
        return False
    return True
