"""config.py

Bot configuration, read from one YAML file:

    server: irc.libera.chat
    port: 6697
    use_ssl: true
    nickname: j
    channels: ["#j-test"]
    data_dir: data

Secrets may instead come from the environment (or a `.env` file next to the
process): IRC_PASSWORD (NickServ) and IRC_SERVER_PASSWORD (server PASS).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from utils.errors import ConfigError


@dataclass
class BotConfig:
    server: str
    nickname: str
    port: int = 6667
    use_ssl: bool = False
    username: Optional[str] = None
    realname: str = "j, a chat bot"
    password: Optional[str] = None
    server_password: Optional[str] = None
    channels: List[str] = field(default_factory=list)
    data_dir: str = "data"

    # memos
    memo_notify_interval: float = 300.0
    announce_memos: bool = False

    # reconnect backoff
    reconnect_base_delay: float = 1.0
    reconnect_max_delay: float = 300.0
    reconnect_alert_after: int = 10

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BotConfig":
        if not isinstance(raw, dict):
            raise ConfigError("config must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
        for key in ("server", "nickname"):
            if not raw.get(key):
                raise ConfigError(f"missing required config key: {key}")
        channels = raw.get("channels") or []
        if isinstance(channels, str):
            channels = [channels]
        try:
            cfg = cls(**{**raw, "channels": [str(c) for c in channels]})
            cfg.port = int(cfg.port)
            cfg.memo_notify_interval = float(cfg.memo_notify_interval)
            cfg.reconnect_base_delay = float(cfg.reconnect_base_delay)
            cfg.reconnect_max_delay = float(cfg.reconnect_max_delay)
            cfg.reconnect_alert_after = int(cfg.reconnect_alert_after)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid config: {e}", cause=e) from e
        return cfg


def load_config(path: str | Path) -> BotConfig:
    """Load the YAML config at `path`, then apply environment overrides."""
    load_dotenv()
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise ConfigError(f"config file not found: {path}", cause=e) from e
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"could not read config {path}: {e}", cause=e) from e

    cfg = BotConfig.from_dict(raw)
    cfg.password = os.getenv("IRC_PASSWORD") or cfg.password
    cfg.server_password = os.getenv("IRC_SERVER_PASSWORD") or cfg.server_password
    return cfg
