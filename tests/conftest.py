"""Shared fakes for the test suite."""

import asyncio
import json

import pytest

from transport import EventKind, InboundEvent
from utils.errors import TransportError

_DROP = object()


class FakeConnection:
    """In-memory stand-in for IrcConnection."""

    def __init__(self, nickname="j", password=None, fail_sends=False, configured_nickname=None):
        self._nickname = nickname
        self._configured = configured_nickname or nickname
        self._password = password
        self.fail_sends = fail_sends
        self.sent = []
        self.identified = 0
        self.closed = False
        self._queue = asyncio.Queue()

    @property
    def nickname(self):
        return self._nickname

    @property
    def configured_nickname(self):
        return self._configured

    @property
    def password(self):
        return self._password

    def send(self, kind, target, text=""):
        if self.fail_sends:
            raise TransportError("broken pipe")
        self.sent.append((kind, target, text))

    def identify(self):
        self.identified += 1

    def push(self, event):
        self._queue.put_nowait(event)

    def drop(self):
        self._queue.put_nowait(_DROP)

    async def events(self):
        while True:
            item = await self._queue.get()
            if item is _DROP:
                raise TransportError("connection reset by peer")
            yield item

    async def close(self):
        self.closed = True


def chat(sender, target, text):
    return InboundEvent(EventKind.MESSAGE, source=sender, target=target, text=text)


def json_get(payload):
    """HTTP capability that always answers with `payload` as JSON."""
    async def _get(url):
        _get.urls.append(url)
        return json.dumps(payload).encode("utf-8")
    _get.urls = []
    return _get


async def wait_until(predicate, timeout=1.0):
    """Poll `predicate` on the event loop until it is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def state(tmp_path):
    from core.state import BotState
    from urbandict import UrbanDictionary

    s = BotState(data_dir=tmp_path)
    s.dictionary = UrbanDictionary(get=json_get({"list": []}))
    return s
