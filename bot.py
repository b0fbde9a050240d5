"""
j, an IRC bot.

Key rules:
- Commands are addressed as `j: ...` in a channel, or sent by private message.
- Everything else said in a channel feeds the word ledger and markov corpus.
- The supervisor reconnects forever; Ctrl-C / SIGTERM flushes state and exits.

Run:
    python bot.py config.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

from config import BotConfig, load_config
from core.state import BotState
from core.supervisor import Backoff, Supervisor
from transport import IrcConnection
from utils.errors import ConfigError, SetupError, log_error
from utils.logging import log


def _install_signal_handlers(stop: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(stop.set))


async def run(config: BotConfig) -> None:
    stop = asyncio.Event()
    _install_signal_handlers(stop)

    state = BotState.load(config.data_path)
    supervisor = Supervisor(
        lambda: IrcConnection.open(config),
        state,
        stop,
        backoff=Backoff(base=config.reconnect_base_delay, cap=config.reconnect_max_delay),
        alert_after=config.reconnect_alert_after,
        notify_interval=config.memo_notify_interval,
        announce_memos=config.announce_memos,
    )
    await supervisor.run()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="j", description="IRC bot with memos, word history and lookups.")
    parser.add_argument("config", help="path to the YAML config file")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        log_error(f"Bad configuration: {e}")
        return 2

    log(f"Starting as {config.nickname} on {config.server}:{config.port}")
    try:
        asyncio.run(run(config))
    except SetupError as e:
        log_error(f"Could not start: {e}", e.cause)
        return 1
    log("Bye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
