"""Tests for event classification and control events."""

import pytest

from conftest import FakeConnection, chat
from core.handlers import classify, handle_event
from core.response import Deferred, Reply
from memos import Memo
from transport import EventKind, InboundEvent, SendKind
from utils.errors import TransportError


def no_spawn(deferred, reply):
    raise AssertionError("nothing should be deferred")


class TestClassify:
    """classify() routing decisions."""

    def test_prefixed_channel_message(self):
        reply, text = classify(chat("alice", "#chan", "j:   word fox "), "j")

        assert reply == Reply(SendKind.NOTICE, "#chan")
        assert text == "word fox"

    def test_private_message(self):
        reply, text = classify(chat("alice", "j", "memo read"), "j")

        assert reply == Reply(SendKind.PRIVMSG, "alice")
        assert text == "memo read"

    def test_passive(self):
        reply, text = classify(chat("alice", "#chan", "jay: not for the bot"), "j")

        assert reply is None
        assert text == "jay: not for the bot"

    def test_configured_nick_still_addresses_after_rename(self):
        reply, text = classify(chat("alice", "#chan", "j: help"), "j_", "j")

        assert reply == Reply(SendKind.NOTICE, "#chan")
        assert text == "help"

    def test_current_nick_prefix(self):
        reply, text = classify(chat("alice", "#chan", "j_: help"), "j_", "j")

        assert reply == Reply(SendKind.NOTICE, "#chan")
        assert text == "help"


class TestMessages:
    """End-to-end chat message handling."""

    def test_memo_via_channel(self, state, conn):
        """`j: memo bob hey there` from alice stores one memo and confirms."""
        handle_event(chat("alice", "#chan", "j: memo bob hey there"), state, conn, no_spawn)

        assert state.memos.mailboxes["bob"].entries == [Memo(sender="alice", text="hey there")]
        assert conn.sent == [(SendKind.NOTICE, "#chan", "added memo for bob")]

    def test_command_after_fallback_rename(self, state):
        conn = FakeConnection(nickname="j_", configured_nickname="j")

        handle_event(chat("alice", "#chan", "j: word"), state, conn, no_spawn)

        assert conn.sent == [(SendKind.NOTICE, "#chan", "usage: word TERM")]

    def test_reply_to_private_message(self, state, conn):
        handle_event(chat("alice", "j", "word"), state, conn, no_spawn)

        assert conn.sent == [(SendKind.PRIVMSG, "alice", "usage: word TERM")]

    def test_passive_message_updates_ledger_silently(self, state, conn):
        state.words.record(["the"], now=1)

        handle_event(chat("alice", "#chan", "the quick fox"), state, conn, no_spawn)

        assert state.words.get("the").count == 2
        assert state.words.get("quick").count == 1
        assert state.words.get("fox").count == 1
        assert conn.sent == []
        assert list(state.generator.lines) == ["the quick fox"]

    def test_empty_response_sends_nothing(self, state, conn):
        handle_event(chat("alice", "#chan", "j: clear"), state, conn, no_spawn)

        assert conn.sent == []

    @pytest.mark.asyncio
    async def test_dict_is_spawned_with_reply_target(self, state, conn):
        spawned = []

        handle_event(chat("alice", "#chan", "j: dict xyzzy"), state, conn, lambda d, r: spawned.append((d, r)))

        assert conn.sent == []
        deferred, reply = spawned[0]
        assert isinstance(deferred, Deferred)
        assert reply == Reply(SendKind.NOTICE, "#chan")
        assert await deferred.pending == "no results for 'xyzzy'"

    def test_memo_read_failure_keeps_unsent_memos(self, state):
        conn = FakeConnection(fail_sends=True)
        state.memos.deliver("bob", Memo("alice", "one"))
        state.memos.deliver("bob", Memo("alice", "two"))

        with pytest.raises(TransportError):
            handle_event(chat("bob", "j", "memo read"), state, conn, no_spawn)

        assert state.memos.count("bob") == 2


class TestControlEvents:
    """PING, JOIN and nickname collisions."""

    def test_ping_pong(self, state, conn):
        handle_event(InboundEvent(EventKind.PING, target="irc.example.net"), state, conn, no_spawn)

        assert conn.sent == [(SendKind.PONG, "irc.example.net", "")]

    def test_join_notification_is_throttled(self, state, conn):
        """bob gets one notice per window, and a fresh one after it."""
        state.memos.deliver("bob", Memo("alice", "hey there"))
        join = InboundEvent(EventKind.JOIN, source="bob", target="#chan")

        handle_event(join, state, conn, no_spawn, notify_interval=300, now=10_000)
        handle_event(join, state, conn, no_spawn, notify_interval=300, now=10_005)
        assert len(conn.sent) == 1
        assert conn.sent[0] == (
            SendKind.PRIVMSG,
            "bob",
            "Welcome back bob, you have 1 memos. type `/msg j memo read` to read.",
        )

        state.memos.deliver("bob", Memo("carol", "another"))
        handle_event(join, state, conn, no_spawn, notify_interval=300, now=10_301)
        assert len(conn.sent) == 2
        assert "you have 2 memos" in conn.sent[1][2]

    def test_join_without_mail(self, state, conn):
        handle_event(InboundEvent(EventKind.JOIN, source="bob", target="#chan"), state, conn, no_spawn)

        assert conn.sent == []

    def test_join_announcement(self, state, conn):
        state.memos.deliver("bob", Memo("alice", "hi"))

        handle_event(
            InboundEvent(EventKind.JOIN, source="bob", target="#chan"),
            state, conn, no_spawn, announce_memos=True, now=1000,
        )

        assert conn.sent[1] == (SendKind.NOTICE, "#chan", "bob has 1 memos waiting")

    def test_own_join_ignored(self, state, conn):
        state.memos.deliver("j", Memo("alice", "hi"))

        handle_event(InboundEvent(EventKind.JOIN, source="j", target="#chan"), state, conn, no_spawn)

        assert conn.sent == []

    def test_nickname_in_use(self, state):
        conn = FakeConnection(password="hunter2")

        handle_event(InboundEvent(EventKind.NICK_IN_USE, target="*", text="j"), state, conn, no_spawn)

        assert conn.sent == [
            (SendKind.NICK, "j_", ""),
            (SendKind.PRIVMSG, "NickServ", "RECOVER j hunter2"),
        ]
        assert conn.identified == 1

    def test_nickname_in_use_without_password(self, state, conn):
        handle_event(InboundEvent(EventKind.NICK_IN_USE, target="*", text="j"), state, conn, no_spawn)

        assert conn.sent == [(SendKind.NICK, "j_", "")]
        assert conn.identified == 1
