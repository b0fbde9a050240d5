from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional

MEMOS_FILE = "memos.json"

# Seconds between two "you have mail" notices to the same user
NOTIFY_INTERVAL = 300


@dataclass(frozen=True)
class Memo:
    sender: str
    text: str


@dataclass
class Mailbox:
    entries: List[Memo] = field(default_factory=list)
    last_notified: float = 0.0


class MemoStore:
    """Per-recipient memo queues, keyed by nickname (case-sensitive)."""

    def __init__(self, mailboxes: Optional[Dict[str, Mailbox]] = None):
        self.mailboxes: Dict[str, Mailbox] = mailboxes or {}

    def deliver(self, to: str, memo: Memo) -> None:
        self.mailboxes.setdefault(to, Mailbox()).entries.append(memo)

    def count(self, user: str) -> int:
        box = self.mailboxes.get(user)
        return len(box.entries) if box else 0

    def notify_if_due(self, user: str, now: float, min_interval: float = NOTIFY_INTERVAL) -> Optional[int]:
        """Memo count for `user` if a notice is due, else None.

        A notice is due when there is mail and the last one went out more
        than `min_interval` seconds ago. Returning a count marks it sent.
        """
        box = self.mailboxes.get(user)
        if box is None or not box.entries:
            return None
        if now - box.last_notified <= min_interval:
            return None
        box.last_notified = now
        return len(box.entries)

    def drain(self, user: str) -> List[Memo]:
        box = self.mailboxes.pop(user, None)
        return box.entries if box else []

    def restore(self, user: str, memos: List[Memo]) -> None:
        """Put drained memos back in front of anything that arrived since."""
        if not memos:
            return
        box = self.mailboxes.setdefault(user, Mailbox())
        box.entries[:0] = memos

    # ------------------
    # Persistence
    # ------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            user: {
                "entries": [asdict(m) for m in box.entries],
                "last_notified": box.last_notified,
            }
            for user, box in self.mailboxes.items()
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "MemoStore":
        mailboxes: Dict[str, Mailbox] = {}
        for user, box in raw.items():
            mailboxes[str(user)] = Mailbox(
                entries=[Memo(sender=str(m["sender"]), text=str(m["text"])) for m in box["entries"]],
                last_notified=float(box.get("last_notified", 0.0)),
            )
        return cls(mailboxes)
