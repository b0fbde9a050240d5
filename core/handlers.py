"""IRC event handlers.

Every inbound event passes through `handle_event()`:

1) PING -> PONG
2) JOIN -> "you have memos" notice, throttled per user
3) nickname in use -> rename, ask NickServ to recover, identify again
4) chat messages are classified:
   - `<nick>: ...` in a channel   -> command, answered with a channel NOTICE
   - private message to us        -> command, answered with a PRIVMSG
   - anything else                -> passive: word ledger + markov corpus
"""

from __future__ import annotations

from typing import Callable, Optional

from commands_main import respond
from core.response import Deferred, Reply, immediate_text
from memos import NOTIFY_INTERVAL
from transport import NICKSERV, Connection, EventKind, InboundEvent, SendKind
from utils.helpers import now_ts
from utils.logging import log, log_event
from utils.text import iter_words

Spawn = Callable[[Deferred, Reply], None]


def classify(event: InboundEvent, nickname: str, configured: Optional[str] = None) -> tuple[Optional[Reply], str]:
    """Decide where a chat message's answer goes.

    `nickname` is the nick we currently hold; `configured` is the one from the
    config file, which stays a valid address after a fallback rename.
    Returns `(reply, command_text)`; `reply` is None for passive chatter.
    """
    body = event.text or ""
    for nick in (nickname, configured):
        prefix = f"{nick}:"
        if nick and body.startswith(prefix):
            return Reply(SendKind.NOTICE, event.target or event.source or ""), body[len(prefix):].strip()
    if event.target == nickname:
        return Reply(SendKind.PRIVMSG, event.source or ""), body.strip()
    return None, body


def handle_message(event: InboundEvent, state, conn: Connection, spawn: Spawn) -> None:
    sender = event.source or ""
    reply, text = classify(event, conn.nickname, conn.configured_nickname)

    if reply is None:
        state.words.record(iter_words(text))
        state.generator.feed(text)
        return

    log_event("<<", f"{sender}@{event.target}", text)
    response = respond(state, sender, text, conn)

    if isinstance(response, Deferred):
        spawn(response, reply)
        return
    out = immediate_text(response)
    if out:
        log_event(">>", reply.target, out)
        reply.send(conn, out)


def handle_join(
    event: InboundEvent,
    state,
    conn: Connection,
    *,
    notify_interval: float = NOTIFY_INTERVAL,
    announce_memos: bool = False,
    now: Optional[float] = None,
) -> None:
    user = event.source
    if not user or user == conn.nickname:
        return
    now = now_ts() if now is None else now
    count = state.memos.notify_if_due(user, now, notify_interval)
    if count is None:
        return
    log(f"[Memo] Notifying {user} of {count} memo(s)")
    conn.send(
        SendKind.PRIVMSG,
        user,
        f"Welcome back {user}, you have {count} memos. type `/msg {conn.nickname} memo read` to read.",
    )
    if announce_memos and event.target:
        conn.send(SendKind.NOTICE, event.target, f"{user} has {count} memos waiting")


def handle_nick_in_use(event: InboundEvent, conn: Connection) -> None:
    taken = event.text or conn.nickname
    fallback = f"{taken}_"
    log(f"[IRC] Nickname {taken} in use, switching to {fallback}")
    conn.send(SendKind.NICK, fallback)
    if conn.password:
        conn.send(SendKind.PRIVMSG, NICKSERV, f"RECOVER {taken} {conn.password}")
    conn.identify()


def handle_event(
    event: InboundEvent,
    state,
    conn: Connection,
    spawn: Spawn,
    *,
    notify_interval: float = NOTIFY_INTERVAL,
    announce_memos: bool = False,
    now: Optional[float] = None,
) -> None:
    """Route one inbound event. Transport errors from sends propagate."""
    if event.kind is EventKind.PING:
        conn.send(SendKind.PONG, event.target or event.text or "")
    elif event.kind is EventKind.JOIN:
        handle_join(event, state, conn, notify_interval=notify_interval, announce_memos=announce_memos, now=now)
    elif event.kind is EventKind.NICK_IN_USE:
        handle_nick_in_use(event, conn)
    elif event.kind is EventKind.MESSAGE:
        handle_message(event, state, conn, spawn)
