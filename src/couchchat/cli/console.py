"""Shared rich console for CLI output."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

console = Console()


def error(msg: str) -> None:
    console.print(f"[red]{msg}[/red]")


def success(msg: str) -> None:
    console.print(f"[green]{msg}[/green]")


def create_table(title: str, columns: list[tuple[str, str]]) -> Table:
    """Create a table with one styled column per (name, style) pair."""
    table = Table(title=title)
    for name, style in columns:
        table.add_column(name, style=style)
    return table
