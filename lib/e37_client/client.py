from __future__ import annotations

import enum
import json
import logging
import threading
from typing import Any

import httpx

from .auth import CHECK_PATH, TokenCell, login
from .config_types import E37Options
from .errors import ApiError, AuthError, E37ClientError
from .transport import Transport, normalize_url

log = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    UNKNOWN = "unknown"
    VALID = "valid"
    REAUTHENTICATING = "reauthenticating"
    FAILED = "failed"


class E37Client:
    """Authenticated session against an E37 server.

    Construction logs in right away and raises if that fails, so an instance
    always carries a token. Collectors call ``ping()`` once per scrape cycle
    and then any number of ``request()`` calls.
    """

    def __init__(self, opts: E37Options, *, transport: httpx.BaseTransport | None = None):
        self.opts = opts
        self.base_url = normalize_url(opts.url)
        self._t = Transport(
            self.base_url,
            timeout_s=opts.timeout_s,
            insecure=opts.insecure,
            transport=transport,
        )
        try:
            token = login(self._t, username=opts.username, password=opts.password)
        except Exception:
            self._t.close()
            raise
        self._token = TokenCell(token)
        self._refresh_lock = threading.Lock()
        self.state = SessionState.UNKNOWN
        self.refresh_count = 0

    def __enter__(self) -> E37Client:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._t.close()

    @property
    def token(self) -> str:
        return self._token.get()

    @property
    def concurrency(self) -> int:
        return self.opts.concurrency

    def request(self, method: str, endpoint: str, body: Any = None) -> bytes:
        if body is None or isinstance(body, (bytes, str)):
            content = body
        else:
            content = json.dumps(body)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._token.get()}",
        }
        r = self._t.request(method, endpoint, content=content, headers=headers)
        if r.status_code != 200:
            msg = f"error handling request for {endpoint} http-statuscode: {r.status_code} {r.reason_phrase}"
            if r.status_code in (401, 403):
                raise AuthError(r.status_code, msg, endpoint=endpoint)
            raise ApiError(r.status_code, msg, endpoint=endpoint)

        log.debug("%s %s -> %s (%d bytes)", method, endpoint, r.status_code, len(r.content))
        return r.content

    def refresh_token(self, stale: str | None = None) -> str:
        """Log in again and store the new token.

        When ``stale`` is given and the stored token already differs from it,
        another caller refreshed in the meantime and no login is made.
        """
        with self._refresh_lock:
            current = self._token.get()
            if stale is not None and current != stale:
                return current
            token = login(self._t, username=self.opts.username, password=self.opts.password)
            self._token.set(token)
            self.refresh_count += 1
            return token

    def ping(self) -> bool:
        token = self._token.get()
        r = self._t.request(
            "POST",
            CHECK_PATH,
            json_body={"token": token},
            headers={"Content-Type": "application/json"},
        )
        try:
            data = r.json()
        except ValueError as e:
            raise ApiError(r.status_code, f"token check returned malformed JSON: {e}", r.text[:1000] or None) from e

        if isinstance(data, dict) and isinstance(data.get("username"), str):
            self.state = SessionState.VALID
            return True

        log.error("token check failed (%s %s), logging in again", r.status_code, r.reason_phrase)
        self.state = SessionState.REAUTHENTICATING
        try:
            self.refresh_token(stale=token)
        except E37ClientError as e:
            self.state = SessionState.FAILED
            raise AuthError(
                r.status_code,
                f"re-authentication failed after token check returned {r.status_code} {r.reason_phrase}: {e}",
                r.text[:1000] or None,
            ) from e
        self.state = SessionState.VALID
        return True
