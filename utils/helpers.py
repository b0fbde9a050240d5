"""Common utility helpers used across the project."""

from __future__ import annotations

import time

__all__ = ["now_ts", "split_once"]


def now_ts() -> int:
    """Return current Unix timestamp as integer."""
    return int(time.time())


def split_once(text: str) -> tuple[str, str | None]:
    """Split on the first space: `"memo bob hi"` -> `("memo", "bob hi")`.

    The remainder is None when there is no space (or nothing after it).
    """
    first, sep, rest = text.partition(" ")
    if not sep or not rest:
        return first, None
    return first, rest
