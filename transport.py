"""transport.py

The bot's view of the chat network.

The core only talks to the `Connection` protocol:
- `send(kind, target, text)` for every outbound line
- `identify()` to (re)authenticate and join the configured channels
- `events()`, an async stream of `InboundEvent`; it raises TransportError
  when the link goes away

`IrcConnection` implements it on top of the `irc` package (irc.client_aio),
which owns sockets, framing and registration.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, AsyncIterator, Optional, Protocol

import irc.client
import irc.client_aio
import irc.connection

from utils.errors import TransportError
from utils.logging import log

if TYPE_CHECKING:
    from config import BotConfig

NICKSERV = "NickServ"


class EventKind(str, Enum):
    MESSAGE = "message"
    PING = "ping"
    JOIN = "join"
    NICK_IN_USE = "nicknameinuse"


class SendKind(str, Enum):
    PRIVMSG = "privmsg"
    NOTICE = "notice"
    PONG = "pong"
    NICK = "nick"


@dataclass(frozen=True)
class InboundEvent:
    """One protocol event, stripped down to what the handlers need.

    - MESSAGE: source=sender nick, target=channel or our nick, text=body
    - PING: target=server token to echo back
    - JOIN: source=joining nick, target=channel
    - NICK_IN_USE: text=the nickname that was refused
    """
    kind: EventKind
    source: Optional[str] = None
    target: Optional[str] = None
    text: str = ""


class Connection(Protocol):
    @property
    def nickname(self) -> str: ...

    @property
    def configured_nickname(self) -> str: ...

    @property
    def password(self) -> Optional[str]: ...

    def send(self, kind: SendKind, target: str, text: str = "") -> None: ...

    def identify(self) -> None: ...

    def events(self) -> AsyncIterator[InboundEvent]: ...

    async def close(self) -> None: ...


_CLOSED = object()

_FORWARDED = ("pubmsg", "privmsg", "ping", "join", "nicknameinuse")


class IrcConnection:
    """`Connection` backed by an irc.client_aio reactor."""

    def __init__(self, config: "BotConfig"):
        self.config = config
        self._queue: asyncio.Queue = asyncio.Queue()
        self._registered = False
        self._identify_pending = False

        self.reactor = irc.client_aio.AioReactor(loop=asyncio.get_running_loop())
        # Pings are answered by our own handler
        self.reactor.remove_global_handler("ping", irc.client._ping_ponger)
        for event_type in _FORWARDED:
            self.reactor.add_global_handler(event_type, self._on_event)
        self.reactor.add_global_handler("welcome", self._on_welcome)
        self.reactor.add_global_handler("disconnect", self._on_disconnect)
        self.server = self.reactor.server()

    @classmethod
    async def open(cls, config: "BotConfig") -> "IrcConnection":
        conn = cls(config)
        await conn.connect()
        return conn

    async def connect(self) -> None:
        cfg = self.config
        log(f"[IRC] Connecting to {cfg.server}:{cfg.port} as {cfg.nickname} (ssl={cfg.use_ssl})")
        factory = irc.connection.AioFactory(ssl=True) if cfg.use_ssl else irc.connection.AioFactory()
        try:
            await self.server.connect(
                cfg.server,
                cfg.port,
                cfg.nickname,
                password=cfg.server_password,
                username=cfg.username or cfg.nickname,
                ircname=cfg.realname,
                connect_factory=factory,
            )
        except (OSError, irc.client.ServerConnectionError) as e:
            raise TransportError(f"could not connect to {cfg.server}:{cfg.port}: {e}", cause=e) from e

    @property
    def nickname(self) -> str:
        return self.server.get_nickname() or self.config.nickname

    @property
    def configured_nickname(self) -> str:
        return self.config.nickname

    @property
    def password(self) -> Optional[str]:
        return self.config.password

    # ------------------
    # Outbound
    # ------------------

    def send(self, kind: SendKind, target: str, text: str = "") -> None:
        try:
            if kind is SendKind.PRIVMSG:
                self.server.privmsg(target, text)
            elif kind is SendKind.NOTICE:
                self.server.notice(target, text)
            elif kind is SendKind.PONG:
                self.server.pong(target)
            elif kind is SendKind.NICK:
                self.server.nick(target)
            else:
                raise ValueError(f"unknown send kind: {kind!r}")
        except irc.client.ServerNotConnectedError as e:
            raise TransportError("not connected", cause=e) from e
        except (irc.client.MessageTooLong, irc.client.InvalidCharacters) as e:
            log(f"[IRC] Dropped {kind.value} to {target}: {e}")

    def identify(self) -> None:
        """NickServ IDENTIFY plus channel joins, once registration is done."""
        if not self._registered:
            self._identify_pending = True
            return
        self._identify_pending = False
        if self.password:
            self.send(SendKind.PRIVMSG, NICKSERV, f"IDENTIFY {self.password}")
        for channel in self.config.channels:
            try:
                self.server.join(channel)
            except irc.client.ServerNotConnectedError as e:
                raise TransportError("not connected", cause=e) from e

    async def close(self) -> None:
        if self.server.is_connected():
            self.server.disconnect("bye")

    # ------------------
    # Inbound
    # ------------------

    async def events(self) -> AsyncIterator[InboundEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                raise TransportError("connection closed by server")
            yield item

    def _on_welcome(self, connection, event) -> None:
        self._registered = True
        log(f"[IRC] Registered as {connection.get_nickname()}")
        if self._identify_pending:
            self.identify()

    def _on_disconnect(self, connection, event) -> None:
        self._registered = False
        self._queue.put_nowait(_CLOSED)

    def _on_event(self, connection, event) -> None:
        source = event.source.nick if event.source else None
        args = event.arguments or []
        if event.type in ("pubmsg", "privmsg"):
            item = InboundEvent(EventKind.MESSAGE, source, event.target, args[0] if args else "")
        elif event.type == "ping":
            item = InboundEvent(EventKind.PING, source, event.target)
        elif event.type == "join":
            item = InboundEvent(EventKind.JOIN, source, event.target)
        else:
            item = InboundEvent(EventKind.NICK_IN_USE, source, event.target, args[0] if args else "")
        self._queue.put_nowait(item)
