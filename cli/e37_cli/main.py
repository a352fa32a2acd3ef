from __future__ import annotations

import typer

from .commands import config_cmd, session_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="e37",
        help="E37 API diagnostics",
        no_args_is_help=True,
    )

    app.command("check")(session_cmd.check)
    app.command("request")(session_cmd.request)
    app.add_typer(config_cmd.app, name="config")

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
