from __future__ import annotations

import typer

from e37_client import ConfigError

from .. import console
from ..config import KEYS, load_config, save_config, set_value

app = typer.Typer(help="Manage connection settings (~/.config/e37/config.toml).")


@app.command("show")
def show_config():
    try:
        cfg = load_config()
    except ConfigError as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    console.settings_table(
        [
            ("url", cfg.url),
            ("username", cfg.username),
            ("password", "(set)" if cfg.password else "(empty)"),
            ("concurrency", str(cfg.concurrency)),
            ("timeout", f"{cfg.timeout_s}s"),
            ("insecure", str(cfg.insecure).lower()),
        ]
    )


@app.command("set")
def set_config(
        key: str = typer.Argument(..., help=f"Setting key ({', '.join(KEYS)})."),
        value: str = typer.Argument(..., help="New value."),
):
    try:
        cfg = load_config()
        set_value(cfg, key, value)
    except ConfigError as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
