"""`dict TERM`: Urban Dictionary lookup, answered later."""
from core.response import Deferred, Info, Response

DICT_USAGE = "usage: dict TERM"


def handle_dict(state, term: str | None) -> Response:
	if not term:
		return Info(DICT_USAGE)
	return Deferred(state.dictionary.lookup(term.strip()))
