from __future__ import annotations

import os
import re
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from e37_client import ConfigError, E37Options
from e37_client.config_types import (
    DEFAULT_CONCURRENCY,
    DEFAULT_INSECURE,
    DEFAULT_PASSWORD,
    DEFAULT_TIMEOUT_S,
    DEFAULT_URL,
    DEFAULT_USERNAME,
)
from e37_client.transport import normalize_url

APP_NAME = "e37"
CONFIG_FILENAME = "config.toml"

ENV_URL = "E37_SERVER"
ENV_USERNAME = "E37_USER"
ENV_PASSWORD = "E37_PASS"
ENV_CONCURRENCY = "E37_CONCURRENT"
ENV_TIMEOUT = "E37_TIMEOUT"
ENV_INSECURE = "E37_INSECURE"

KEYS = ("url", "username", "password", "concurrency", "timeout", "insecure")

_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)(ms|s|m)?$")
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class AppConfig:
    url: str = DEFAULT_URL
    username: str = DEFAULT_USERNAME
    password: str = DEFAULT_PASSWORD
    concurrency: int = DEFAULT_CONCURRENCY
    timeout_s: float = DEFAULT_TIMEOUT_S
    insecure: bool = DEFAULT_INSECURE


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def parse_duration(raw: Any) -> float:
    """Seconds from a number or a string like ``1600ms``, ``1.6s`` or ``2m``."""
    if isinstance(raw, bool):
        raise ConfigError(f"invalid timeout: {raw!r}")
    if isinstance(raw, (int, float)):
        return float(raw)
    m = _DURATION_RE.match(str(raw).strip().lower())
    if not m:
        raise ConfigError(f"invalid timeout: {raw!r}")
    value = float(m.group(1))
    unit = m.group(2) or "s"
    if unit == "ms":
        return value / 1000.0
    if unit == "m":
        return value * 60.0
    return value


def parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    value = str(raw).strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"invalid boolean: {raw!r}")


def parse_int(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigError(f"invalid integer: {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid integer: {raw!r}") from e


def set_value(cfg: AppConfig, key: str, raw: Any) -> None:
    k = key.strip().lower()
    if k == "url":
        cfg.url = normalize_url(str(raw))
    elif k == "username":
        cfg.username = str(raw)
    elif k == "password":
        cfg.password = str(raw)
    elif k == "concurrency":
        concurrency = parse_int(raw)
        if concurrency < 1:
            raise ConfigError(f"concurrency must be >= 1, got {concurrency}")
        cfg.concurrency = concurrency
    elif k == "timeout":
        timeout_s = parse_duration(raw)
        if timeout_s <= 0:
            raise ConfigError(f"timeout must be positive, got {raw!r}")
        cfg.timeout_s = timeout_s
    elif k == "insecure":
        cfg.insecure = parse_bool(raw)
    else:
        raise ConfigError(f"unknown setting: {key}")


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "url": cfg.url,
        "username": cfg.username,
        "password": cfg.password,
        "concurrency": cfg.concurrency,
        "timeout": cfg.timeout_s,
        "insecure": cfg.insecure,
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    for key in KEYS:
        if data.get(key) is not None:
            set_value(cfg, key, data[key])
    return cfg


def apply_env(cfg: AppConfig) -> AppConfig:
    env_keys = {
        "url": ENV_URL,
        "username": ENV_USERNAME,
        "password": ENV_PASSWORD,
        "concurrency": ENV_CONCURRENCY,
        "timeout": ENV_TIMEOUT,
        "insecure": ENV_INSECURE,
    }
    for key, env_name in env_keys.items():
        value = os.getenv(env_name)
        if value is not None and value.strip():
            set_value(cfg, key, value)
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        data = {}
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e
    cfg = from_toml(data)
    return apply_env(cfg)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    # holds the password
    os.chmod(path, 0o600)
    return path


def to_options(cfg: AppConfig, *, url_override: str | None = None) -> E37Options:
    return E37Options(
        url=url_override or cfg.url,
        username=cfg.username,
        password=cfg.password,
        concurrency=cfg.concurrency,
        timeout_s=cfg.timeout_s,
        insecure=cfg.insecure,
    )
