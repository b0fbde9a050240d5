"""Outcome of dispatching one command line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Union

from transport import Connection, SendKind


@dataclass(frozen=True)
class Info:
    """Fixed text such as a usage hint."""
    text: str


@dataclass(frozen=True)
class Message:
    text: str


@dataclass(frozen=True)
class Error:
    text: str


@dataclass(frozen=True)
class EmptyResponse:
    """Nothing to say (or the handler already replied itself)."""


@dataclass(frozen=True)
class Deferred:
    """Text that is not known yet; the supervisor awaits it off the dispatch path."""
    pending: Awaitable[str]


Empty = EmptyResponse()

Response = Union[Info, Message, Error, EmptyResponse, Deferred]


@dataclass(frozen=True)
class Reply:
    """Where the answer to a command goes: a channel notice or a private message."""
    kind: SendKind
    target: str

    def send(self, conn: Connection, text: str) -> None:
        conn.send(self.kind, self.target, text)


def immediate_text(response: Response) -> str | None:
    """Text to send right away, if the response carries any."""
    if isinstance(response, (Info, Message, Error)):
        return response.text
    return None
