# core package - dispatch, bot state and the connection supervisor
#
# Only the leaf modules are re-exported here: commands/* import
# core.response, and core.handlers imports the commands back.
# Use core.handlers / core.supervisor directly.

from .response import Deferred, Empty, Error, Info, Message, Reply, Response
from .state import BotState

__all__ = [
    "Deferred",
    "Empty",
    "Error",
    "Info",
    "Message",
    "Reply",
    "Response",
    "BotState",
]
