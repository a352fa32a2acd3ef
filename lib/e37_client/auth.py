from __future__ import annotations

import logging
import threading

import httpx

from .config_types import E37Options
from .errors import AuthError
from .transport import Transport, normalize_url

log = logging.getLogger(__name__)

AUTH_PATH = "/api/auth"
CHECK_PATH = "/api/auth/check"


def mask_token(token: str) -> str:
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}***"


def login(t: Transport, *, username: str, password: str) -> str:
    """Exchange credentials for a bearer token.

    The exchange goes through the session transport, so it follows the same
    TLS policy as every other call, and a non-2xx answer is reported as an
    HTTP failure instead of being parsed as a token response.
    """
    r = t.request(
        "POST",
        AUTH_PATH,
        json_body={"username": username, "password": password},
        headers={"Content-Type": "application/json"},
    )
    if not r.is_success:
        raise AuthError(
            r.status_code,
            f"login failed with {r.status_code} {r.reason_phrase}",
            r.text[:1000] or None,
        )
    try:
        data = r.json()
    except ValueError as e:
        raise AuthError(r.status_code, f"login returned malformed JSON: {e}", r.text[:1000] or None) from e

    token = data.get("token") if isinstance(data, dict) else None
    if not isinstance(token, str) or not token:
        raise AuthError(r.status_code, "login returned no token", None)
    log.debug("token acquired: %s", mask_token(token))
    return token


def get_token(opts: E37Options, *, transport: httpx.BaseTransport | None = None) -> str:
    t = Transport(
        normalize_url(opts.url),
        timeout_s=opts.timeout_s,
        insecure=opts.insecure,
        transport=transport,
    )
    try:
        return login(t, username=opts.username, password=opts.password)
    finally:
        t.close()


class TokenCell:
    """Holds the current bearer token; reads and swaps are serialized."""

    def __init__(self, token: str):
        self._lock = threading.Lock()
        self._token = token

    def get(self) -> str:
        with self._lock:
            return self._token

    def set(self, token: str) -> None:
        with self._lock:
            self._token = token
