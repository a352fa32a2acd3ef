from __future__ import annotations

import logging
import ssl
from typing import Any
from urllib.parse import urlsplit

import httpx

from .errors import ConfigError, NetworkError

log = logging.getLogger(__name__)

USER_AGENT = "e37-client/0.1.0"


def normalize_url(raw: str | None) -> str:
    """Validate the E37 address and return it without a trailing slash.

    A value without ``://`` is treated as a plain ``host[:port]`` and gets
    ``http://`` prepended.
    """
    value = (raw or "").strip()
    if not value:
        raise ConfigError("invalid E37 URL: empty")
    if "://" not in value:
        value = f"http://{value}"
    try:
        parts = urlsplit(value)
        # port is parsed lazily, force it so "host:abc" is rejected here
        parts.port
    except ValueError as e:
        raise ConfigError(f"invalid E37 URL: {e}") from e
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigError(f"invalid E37 URL: {value}")
    return value.rstrip("/")


def build_ssl_context(insecure: bool) -> ssl.SSLContext:
    ctx = ssl.create_default_context()
    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    if insecure:
        # same as curl -k
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


class Transport:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float,
        insecure: bool,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url
        self.ssl_context = build_ssl_context(insecure)
        self._client = httpx.Client(
            timeout=timeout_s,
            verify=self.ssl_context,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        content: bytes | str | None = None,
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        # plain concatenation, endpoints are passed through as given
        url = self.base_url + path
        log.debug("%s %s", method, url)
        try:
            return self._client.request(method, url, content=content, json=json_body, headers=headers)
        except httpx.RequestError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e
