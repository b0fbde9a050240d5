"""Connection supervisor: keeps the bot online and its state on disk.

    Disconnected -> Connecting -> Connected -> (Disconnected | ShuttingDown)

While connected, one loop drains a single inbox (see message_queue.py) fed by
the connection pump, finished `dict` lookups and the shutdown signal. State is
flushed once every time a session ends, whatever the reason.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Set, Tuple

from core.handlers import handle_event
from core.response import Deferred, Reply
from core.state import BotState
from memos import NOTIFY_INTERVAL
from message_queue import ItemKind, MessageQueue
from transport import Connection
from utils.errors import SetupError, TransportError, log_error
from utils.logging import log, log_event

Connector = Callable[[], Awaitable[Connection]]

CONNECT_TIMEOUT_S = 30.0
# A session that lasted this long resets the backoff
STABLE_SESSION_S = 60.0


class Status(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    SHUTTING_DOWN = "shutting_down"


@dataclass
class Backoff:
    base: float = 1.0
    factor: float = 2.0
    cap: float = 300.0

    def delay(self, failures: int) -> float:
        if failures <= 0:
            return 0.0
        return min(self.cap, self.base * self.factor ** (failures - 1))


class Supervisor:
    """Runs sessions until the stop event is set."""

    def __init__(
        self,
        connect: Connector,
        state: BotState,
        stop: asyncio.Event,
        *,
        backoff: Optional[Backoff] = None,
        alert_after: int = 10,
        notify_interval: float = NOTIFY_INTERVAL,
        announce_memos: bool = False,
    ):
        self._connect = connect
        self.state = state
        self._stop = stop
        self.backoff = backoff or Backoff()
        self.alert_after = alert_after
        self.notify_interval = notify_interval
        self.announce_memos = announce_memos

        self.status = Status.DISCONNECTED
        self.failures = 0
        self.sessions = 0

    async def run(self) -> None:
        """Connect, serve, reconnect; returns once shutdown was requested.

        Raises SetupError if the very first connection attempt fails.
        """
        ever_connected = False

        while not self._stop.is_set():
            self.status = Status.CONNECTING
            try:
                conn = await self._open()
            except TransportError as e:
                self.status = Status.DISCONNECTED
                if not ever_connected:
                    raise SetupError(f"initial connection failed: {e}", cause=e) from e
                self._record_failure(e)
                await self._wait_backoff()
                continue

            ever_connected = True
            shutdown, lasted = await self._run_session(conn)
            if shutdown:
                break

            self.status = Status.DISCONNECTED
            if lasted >= STABLE_SESSION_S:
                self.failures = 0
            self._record_failure(None)
            await self._wait_backoff()

        self.status = Status.SHUTTING_DOWN
        log("[Supervisor] Stopped.")

    async def _open(self) -> Connection:
        try:
            return await asyncio.wait_for(self._connect(), timeout=CONNECT_TIMEOUT_S)
        except asyncio.TimeoutError as e:
            raise TransportError("connection attempt timed out", cause=e) from e

    def _record_failure(self, exc: Optional[BaseException]) -> None:
        self.failures += 1
        reason = f": {exc}" if exc else ""
        log(f"[Supervisor] Disconnected (failure #{self.failures}){reason}")
        if self.failures >= self.alert_after and self.failures % self.alert_after == 0:
            log_error(
                f"[Supervisor] {self.failures} consecutive connection failures; "
                "still retrying, needs operator attention."
            )

    async def _wait_backoff(self) -> None:
        delay = self.backoff.delay(self.failures)
        if delay > 0:
            log(f"[Supervisor] Reconnecting in {delay:.1f}s")
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    # ------------------
    # One connected session
    # ------------------

    async def _run_session(self, conn: Connection) -> Tuple[bool, float]:
        """Serve one connection.

        Returns `(shutdown_requested, seconds_connected)`.
        """
        self.status = Status.CONNECTED
        self.sessions += 1
        self.state.tracker.mark_connect()
        log(f"[Supervisor] Connected (session #{self.sessions}).")

        inbox = MessageQueue()
        lookups: Set[asyncio.Future] = set()
        pump = asyncio.create_task(self._pump(conn, inbox))
        watcher = asyncio.create_task(self._watch_stop(inbox))

        shutdown = False
        try:
            conn.identify()
            shutdown = await self._consume(conn, inbox, lookups)
        except TransportError as e:
            log(f"[Supervisor] Transport error: {e}")
        finally:
            # Abandon in-flight lookups; their results would have nowhere to go
            pending = [pump, watcher, *lookups]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

            self.state.save()
            lasted = self.state.tracker.mark_disconnect()
            try:
                await conn.close()
            except (TransportError, OSError) as e:
                log(f"[Supervisor] Error while closing connection: {e}")
        return shutdown, lasted

    async def _consume(self, conn: Connection, inbox: MessageQueue, lookups: Set[asyncio.Future]) -> bool:
        def spawn(deferred: Deferred, reply: Reply) -> None:
            future = asyncio.ensure_future(deferred.pending)
            lookups.add(future)
            future.add_done_callback(lambda f: self._complete(f, reply, inbox, lookups))

        while True:
            item = await inbox.get()
            if item.kind is ItemKind.SHUTDOWN:
                self.status = Status.SHUTTING_DOWN
                log("[Supervisor] Shutdown requested.")
                return True
            if item.kind is ItemKind.DISCONNECTED:
                log(f"[Supervisor] Connection lost: {item.payload}")
                return False

            try:
                if item.kind is ItemKind.COMPLETION:
                    log_event(">>", item.reply.target, item.payload)
                    item.reply.send(conn, item.payload)
                else:
                    handle_event(
                        item.payload,
                        self.state,
                        conn,
                        spawn,
                        notify_interval=self.notify_interval,
                        announce_memos=self.announce_memos,
                    )
            except TransportError:
                raise
            except Exception as e:
                # One bad event must not take the session down
                log_error(f"[Supervisor] Failed to handle {item.kind.value}: {item.payload!r}", e)

    @staticmethod
    def _complete(future: asyncio.Future, reply: Reply, inbox: MessageQueue, lookups: Set[asyncio.Future]) -> None:
        lookups.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        text = f"something went wrong: {exc}" if exc else future.result()
        inbox.put_completion(text, reply)

    async def _pump(self, conn: Connection, inbox: MessageQueue) -> None:
        try:
            async for event in conn.events():
                inbox.put_event(event)
            inbox.put_disconnected(TransportError("event stream ended"))
        except TransportError as e:
            inbox.put_disconnected(e)
        except Exception as e:
            log_error("[Supervisor] Event stream failed", e)
            inbox.put_disconnected(e)

    async def _watch_stop(self, inbox: MessageQueue) -> None:
        await self._stop.wait()
        inbox.put_shutdown()
