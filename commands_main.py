"""commands_main.py

Parsing and routing of command lines. A command line is what is left after
the address prefix (`j: ...`) or the whole body of a private message.

Routing is on the first word, case-sensitive. Anything that is not a known
command goes to the expression evaluator.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from commands.core import handle_clear, handle_freeform, handle_help, handle_markov, handle_uptime
from commands.dictionary import handle_dict
from commands.memo import handle_memo_deliver, handle_memo_read, handle_memo_usage
from commands.word import handle_word
from core.response import Response
from transport import Connection
from utils.helpers import split_once


@dataclass(frozen=True)
class MemoRead:
    pass


@dataclass(frozen=True)
class MemoDeliver:
    to: str
    text: Optional[str]


@dataclass(frozen=True)
class MemoCommand:
    action: Union[MemoRead, MemoDeliver, None]


@dataclass(frozen=True)
class TermCommand:
    word: Optional[str]


@dataclass(frozen=True)
class DictionaryCommand:
    term: Optional[str]


@dataclass(frozen=True)
class ClearCommand:
    pass


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class GenerateCommand:
    pass


@dataclass(frozen=True)
class UptimeCommand:
    pass


@dataclass(frozen=True)
class FreeformCommand:
    text: str


Command = Union[
    MemoCommand, TermCommand, DictionaryCommand, ClearCommand, HelpCommand,
    GenerateCommand, UptimeCommand, FreeformCommand,
]

_SIMPLE = {
    "clear": ClearCommand,
    "help": HelpCommand,
    "markov": GenerateCommand,
    "uptime": UptimeCommand,
}


def parse_command(text: str) -> Command:
    first, rest = split_once(text)
    if first == "memo":
        if rest is None:
            return MemoCommand(None)
        second, body = split_once(rest)
        if second == "read":
            return MemoCommand(MemoRead())
        return MemoCommand(MemoDeliver(to=second, text=body))
    if first == "word":
        return TermCommand(rest)
    if first == "dict":
        return DictionaryCommand(rest)
    if first in _SIMPLE:
        return _SIMPLE[first]()
    return FreeformCommand(text)


def respond(state, user: str, text: str, conn: Connection) -> Response:
    """Run one command line from `user` against the bot state."""
    cmd = parse_command(text)

    if isinstance(cmd, MemoCommand):
        if cmd.action is None:
            return handle_memo_usage()
        if isinstance(cmd.action, MemoRead):
            return handle_memo_read(state, user, conn)
        return handle_memo_deliver(state, user, cmd.action.to, cmd.action.text)
    if isinstance(cmd, TermCommand):
        return handle_word(state, cmd.word)
    if isinstance(cmd, DictionaryCommand):
        return handle_dict(state, cmd.term)
    if isinstance(cmd, ClearCommand):
        return handle_clear(state)
    if isinstance(cmd, HelpCommand):
        return handle_help()
    if isinstance(cmd, GenerateCommand):
        return handle_markov(state)
    if isinstance(cmd, UptimeCommand):
        return handle_uptime(state)
    return handle_freeform(state, cmd.text)
