"""Configuration management commands."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import click
import typer

from couchchat.cli.console import console, create_table, error, success

if TYPE_CHECKING:
    from rich.table import Table

    from couchchat.config import CouchChatConfig

ACTIONS = ("show", "validate")
NOT_SET = "[dim]not set[/dim]"


def _show(path: Path | None) -> None:
    from rich.syntax import Syntax

    from couchchat.config.paths import get_config_path

    shown = path or get_config_path()
    if not shown.exists():
        error(f"Config file not found: {shown}")
        console.print("Settings will be read from the environment only")
        raise typer.Exit(1)

    console.print(f"[bold]Config file: {shown}[/bold]\n")
    console.print(Syntax(shown.read_text(), "toml", theme="monokai", line_numbers=True))


def _summary(config: "CouchChatConfig") -> "Table":
    """Effective settings, with secrets reduced to configured / not set."""
    cloudant = config.cloudant
    telegram_ready = config.telegram is not None and config.telegram.bot_token is not None

    table = create_table("Configuration Summary", [("Setting", "cyan"), ("Value", "green")])
    for setting, value in (
        ("Cloudant account", cloudant.get_account() or NOT_SET),
        ("Cloudant URL", cloudant.get_base_url() or NOT_SET),
        ("Cloudant password", "configured" if cloudant.password else "[yellow]not set[/yellow]"),
        ("View row limit", str(cloudant.view_limit)),
        ("Telegram", "configured" if telegram_ready else "[dim]not configured[/dim]"),
        ("Bot name", config.bot.name),
        ("Exit word", config.bot.exit_word),
    ):
        table.add_row(setting, value)
    return table


def _validate(path: Path | None) -> None:
    from pydantic import ValidationError

    from couchchat.config import load_config

    try:
        config = load_config(path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None
    except ValidationError as e:
        error("Configuration validation failed:")
        console.print()
        for problem in e.errors():
            location = ".".join(str(part) for part in problem["loc"])
            console.print(f"  [yellow]{location}[/yellow]: {problem['msg']}")
        raise typer.Exit(1) from None
    except Exception as e:
        error(f"Error loading config: {e}")
        raise typer.Exit(1) from None

    success("Configuration is valid!")
    console.print()
    console.print(_summary(config))


def register(app: typer.Typer) -> None:
    """Register the config command."""

    @app.command()
    def config(
        action: Annotated[
            str | None,
            typer.Argument(help="Action: show, validate"),
        ] = None,
        path: Annotated[
            Path | None,
            typer.Option(
                "--path",
                "-p",
                help="Path to config file (default: search ./, $COUCHCHAT_HOME, /etc/couchchat)",
            ),
        ] = None,
    ) -> None:
        """Show or validate configuration."""
        if action is None:
            click.echo(click.get_current_context().get_help())
            raise typer.Exit(0)

        if action not in ACTIONS:
            error(f"Unknown action: {action}")
            console.print(f"Valid actions: {', '.join(ACTIONS)}")
            raise typer.Exit(1)

        expanded = path.expanduser() if path else None
        if action == "show":
            _show(expanded)
        else:
            _validate(expanded)
