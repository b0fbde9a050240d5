"""Tests for the supervisor's priority inbox."""

import pytest

from message_queue import ItemKind, MessageQueue


class TestMessageQueue:
    """Ordering rules of MessageQueue."""

    @pytest.mark.asyncio
    async def test_fifo_within_priority(self):
        """Events and completions keep their arrival order."""
        inbox = MessageQueue()
        inbox.put_event("e1")
        inbox.put_completion("c1", reply="#chan")
        inbox.put_event("e2")

        items = [await inbox.get() for _ in range(3)]

        assert [i.payload for i in items] == ["e1", "c1", "e2"]
        assert items[1].kind is ItemKind.COMPLETION
        assert items[1].reply == "#chan"

    @pytest.mark.asyncio
    async def test_shutdown_jumps_the_queue(self):
        inbox = MessageQueue()
        inbox.put_event("e1")
        inbox.put_disconnected(None)
        inbox.put_shutdown()

        first = await inbox.get()
        second = await inbox.get()

        assert first.kind is ItemKind.SHUTDOWN
        assert second.kind is ItemKind.DISCONNECTED
        assert inbox.size == 1
        assert inbox.processed_count == 2
