# uptime.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
import time
from typing import Optional


def _fmt_span(span: timedelta) -> str:
    hours, rem = divmod(span.seconds, 3600)
    mins, secs = divmod(rem, 60)
    return (f"{span.days}d " if span.days else "") + f"{hours:02d}:{mins:02d}:{secs:02d}"


@dataclass
class UptimeTracker:
    """Process lifetime plus connect/disconnect bookkeeping for `uptime`."""

    tz: tzinfo

    started_at: datetime
    started_mono: float

    connects: int = 0
    reconnects: int = 0
    disconnects: int = 0

    # monotonic time of the current session's connect, None while offline
    session_mono: Optional[float] = None

    @classmethod
    def start(cls, tz: tzinfo) -> "UptimeTracker":
        return cls(
            tz=tz,
            started_at=datetime.now(tz),
            started_mono=time.monotonic(),
        )

    def mark_connect(self) -> None:
        if self.connects:
            self.reconnects += 1
        self.connects += 1
        self.session_mono = time.monotonic()

    def mark_disconnect(self) -> float:
        """Close the current session; returns how long it lasted in seconds."""
        self.disconnects += 1
        lasted = self.session_length()
        self.session_mono = None
        return lasted

    def session_length(self) -> float:
        if self.session_mono is None:
            return 0.0
        return time.monotonic() - self.session_mono

    def uptime(self) -> timedelta:
        return timedelta(seconds=int(time.monotonic() - self.started_mono))

    def format_status(self) -> str:
        since_str = self.started_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        online = (
            f"connected {_fmt_span(timedelta(seconds=int(self.session_length())))}"
            if self.session_mono is not None
            else "offline"
        )
        return (
            f"up {_fmt_span(self.uptime())} (since {since_str}), {online}, "
            f"connects: {self.connects}, reconnects: {self.reconnects}, disconnects: {self.disconnects}"
        )
