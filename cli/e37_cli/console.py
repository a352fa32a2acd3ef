from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


def print_json(data) -> None:
    console.print_json(data=data)


def print_text(text: str) -> None:
    console.print(text, markup=False, highlight=False)


def settings_table(rows: list[tuple[str, str]]) -> None:
    table = Table(title="E37 connection", show_header=True, header_style="bold")
    table.add_column("key")
    table.add_column("value", overflow="fold")
    for key, value in rows:
        table.add_row(key, escape(value))
    console.print(table)


def ok(msg: str) -> None:
    console.print(f"[bold green]OK[/] {escape(msg)}")


def warn(msg: str) -> None:
    console.print(f"[bold yellow]WARN[/] {escape(msg)}")


def err(msg: str) -> None:
    console.print(f"[bold red]ERR[/] {escape(msg)}")
