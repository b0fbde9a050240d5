# utils package - shared utilities for the IRC bot
from utils.helpers import now_ts, split_once
from utils.logging import log, log_event, DEFAULT_TZ
from utils.text import iter_words, first_line, truncate_at_word
from utils.errors import JBotError, ConfigError, SetupError, TransportError, EvalError, log_error

__all__ = [
    # helpers
    "now_ts",
    "split_once",
    # logging
    "log",
    "log_event",
    "DEFAULT_TZ",
    # text
    "iter_words",
    "first_line",
    "truncate_at_word",
    # errors
    "JBotError",
    "ConfigError",
    "SetupError",
    "TransportError",
    "EvalError",
    "log_error",
]
