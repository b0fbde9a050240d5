"""
Error types and reporting helpers for the bot.

This module provides:
- Standardized error base class (`JBotError`) for all custom exceptions
- Narrow subclasses for the failure classes the supervisor tells apart
- Logging helper for error events (`log_error`)

Usage:
	from utils.errors import TransportError, log_error
	try:
		conn.send(SendKind.PRIVMSG, "bob", "hi")
	except TransportError as exc:
		log_error("Send failed, reconnecting.", exc)

Transport errors are recovered by reconnecting and never reach users.
Evaluator errors are shown to the user verbatim. Config and setup errors
stop the process before the event loop starts.
"""

from __future__ import annotations
import traceback

from utils.logging import log

__all__ = [
	"JBotError",
	"ConfigError",
	"SetupError",
	"TransportError",
	"EvalError",
	"log_error",
]


class JBotError(Exception):
	"""Base exception for bot errors."""
	def __init__(self, message: str, *, cause: Exception | None = None):
		super().__init__(message)
		self.cause = cause


class ConfigError(JBotError):
	"""The configuration file is missing or invalid."""


class SetupError(JBotError):
	"""The bot could not get far enough to enter its event loop."""


class TransportError(JBotError):
	"""The connection to the network dropped or refused a send."""


class EvalError(JBotError):
	"""The expression evaluator rejected its input."""


def log_error(message: str, exc: BaseException | None = None) -> None:
	"""Log an error with traceback if available."""
	if exc:
		tb = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
		log(f"[ERROR] {message}\n{tb}")
	else:
		log(f"[ERROR] {message}")
