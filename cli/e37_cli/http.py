from __future__ import annotations

from e37_client import E37Client

from .config import AppConfig, to_options


def make_client(cfg: AppConfig, *, url_override: str | None = None) -> E37Client:
    return E37Client(to_options(cfg, url_override=url_override))
