"""Memo commands: leave a message for someone, read your own."""
from core.response import Empty, Info, Message, Response
from memos import Memo
from transport import Connection, SendKind
from utils.errors import TransportError
from utils.logging import log

MEMO_USAGE = "usage: memo (read | USER message)"


def handle_memo_read(state, user: str, conn: Connection) -> Response:
	# One private message per memo; there may be many, so the handler sends them itself
	memos = state.memos.drain(user)
	if memos:
		log(f"[Memo] {user} read {len(memos)} memo(s)")
	for i, memo in enumerate(memos):
		try:
			conn.send(SendKind.PRIVMSG, user, f"{memo.sender}: {memo.text}")
		except TransportError:
			# Unsent memos go back to the front of the queue
			state.memos.restore(user, memos[i:])
			raise
	return Empty


def handle_memo_deliver(state, user: str, to: str, text: str | None) -> Response:
	if not text:
		return Empty
	state.memos.deliver(to, Memo(sender=user, text=text))
	log(f"[Memo] {user} -> {to} ({state.memos.count(to)} waiting)")
	return Message(f"added memo for {to}")


def handle_memo_usage() -> Response:
	return Info(MEMO_USAGE)
