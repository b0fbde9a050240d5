"""`word TERM`: when was a word last seen in the channel."""
from core.response import Info, Message, Response

WORD_USAGE = "usage: word TERM"
NOT_SEEN = "was not seen yet"


def handle_word(state, term: str | None) -> Response:
	if not term:
		return Info(WORD_USAGE)
	description = state.words.describe(term.strip())
	if description is None:
		return Info(NOT_SEEN)
	return Message(description)
