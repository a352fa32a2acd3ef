from __future__ import annotations

import json

import typer

from e37_client import E37ClientError

from .. import console
from ..config import load_config
from ..http import make_client


def check(
        url: str | None = typer.Option(None, "--url", help="Override E37 server URL."),
):
    """Log in and verify the token against /api/auth/check."""
    try:
        cfg = load_config()
        with make_client(cfg, url_override=url) as client:
            client.ping()
            state = client.state.value
            refreshed = client.refresh_count
            base_url = client.base_url
    except E37ClientError as e:
        console.err(f"Check failed: {e}")
        raise typer.Exit(code=2)

    console.ok(f"{base_url}: session {state}")
    if refreshed:
        console.warn(f"Token was refreshed {refreshed} time(s) during the check.")


def request(
        method: str = typer.Argument(..., help="HTTP method."),
        endpoint: str = typer.Argument(..., help="Endpoint path, e.g. /api/system/info."),
        data: str | None = typer.Option(None, "--data", help="JSON request body."),
        url: str | None = typer.Option(None, "--url", help="Override E37 server URL."),
):
    """Send an authenticated request and print the response body."""
    try:
        cfg = load_config()
        with make_client(cfg, url_override=url) as client:
            body = client.request(method.upper(), endpoint, data)
    except E37ClientError as e:
        console.err(str(e))
        raise typer.Exit(code=2)

    text = body.decode("utf-8", errors="replace")
    try:
        parsed = json.loads(text)
    except ValueError:
        console.print_text(text)
        return
    console.print_json(parsed)
