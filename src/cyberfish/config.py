"""Configuration loading from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .constants import DEFAULT_API_URL, NETWORK_TIMEOUT, DEFAULT_PORT, DB_FILE

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class ClientConfig:
    api_url: str
    timeout_s: float
    check_name: bool


@dataclass(frozen=True)
class ServerConfig:
    host: str
    port: int
    db_file: str


@dataclass(frozen=True)
class Config:
    client: ClientConfig
    server: ServerConfig
    log_level: str
    log_file: Optional[str]


def _flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{key} must be a boolean flag, got {raw!r}")


def _number(env: Mapping[str, str], key: str, default, cast):
    raw = env.get(key)
    if raw is None:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {raw!r}")
    return value


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """Load configuration from .env and environment variables."""
    if env is None:
        load_dotenv()
        env = os.environ

    client = ClientConfig(
        api_url=env.get("CYBERFISH_API_URL", DEFAULT_API_URL).rstrip("/"),
        timeout_s=_number(env, "CYBERFISH_TIMEOUT_S", NETWORK_TIMEOUT, float),
        check_name=_flag(env, "CYBERFISH_CHECK_NAME", True),
    )
    server = ServerConfig(
        host=env.get("HOST", "0.0.0.0"),
        port=_number(env, "PORT", DEFAULT_PORT, int),
        db_file=env.get("CYBERFISH_DB", DB_FILE),
    )
    return Config(
        client=client,
        server=server,
        log_level=env.get("LOG_LEVEL", "info"),
        log_file=env.get("LOG_FILE") or None,
    )
