"""Logging utilities for the IRC bot."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import pytz

if TYPE_CHECKING:
    from pytz.tzinfo import BaseTzInfo

# Timestamps are written in UTC unless a caller passes its own zone
DEFAULT_TZ: BaseTzInfo = pytz.utc


def _stamp(tz: BaseTzInfo | None = None) -> str:
    return datetime.now(tz or DEFAULT_TZ).strftime("%Y-%m-%d %H:%M:%S")


def log(message: str, tz: BaseTzInfo | None = None) -> None:
    """Print console messages with a timestamp."""
    print(f"[{_stamp(tz)}] {message}", flush=True)


def log_event(direction: str, target: str, text: str) -> None:
    """Console trace of one chat line, e.g. `>> #chan: hello`."""
    log(f"{direction} {target}: {text}")

