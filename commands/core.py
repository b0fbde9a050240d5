"""Core commands: help, clear, markov, uptime and the calculator fallback."""
from core.response import Empty, Error, Info, Message, Response
from utils.errors import EvalError
from utils.logging import log

HELP_TEXT = (
	"This is j, a chat bot. Commands: memo (read | USER message), word TERM, "
	"dict TERM, markov, uptime, clear; anything else is evaluated as an expression."
)


def handle_help() -> Response:
	return Info(HELP_TEXT)


def handle_clear(state) -> Response:
	state.evaluator.clear()
	return Empty


def handle_markov(state) -> Response:
	return Message(state.generator.generate())


def handle_uptime(state) -> Response:
	return Message(state.tracker.format_status())


def handle_freeform(state, text: str) -> Response:
	try:
		result = state.evaluator.evaluate(text)
	except EvalError as e:
		log(f"[Eval] {text!r}: {e}")
		return Error(str(e))
	if result is None:
		return Empty
	return Message(result)
