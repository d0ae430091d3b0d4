"""Chat command for talking to the bot from a terminal."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from couchchat.cli.console import console, error

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register the chat command."""

    @app.command()
    def chat(
        message: Annotated[
            str | None,
            typer.Argument(
                help="Command to send first, e.g. 'cloudant list databases'",
            ),
        ] = None,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
    ) -> None:
        """Start an interactive session with the bot.

        Examples:
            couchchat chat                            # Interactive mode
            couchchat chat "cloudant list databases"  # Send a command first
        """
        try:
            asyncio.run(_run_chat(message, config_path))
        except KeyboardInterrupt:
            console.print("\n[dim]Goodbye![/dim]")


async def _run_chat(message: str | None, config_path: Path | None) -> None:
    """Run the console session asynchronously."""
    from couchchat.config import load_config
    from couchchat.logging import configure_logging
    from couchchat.providers.console import ConsoleProvider
    from couchchat.runtime import Bot

    # Keep the terminal for the conversation
    configure_logging(level="WARNING")

    try:
        couchchat_config = load_config(config_path)
    except FileNotFoundError as e:
        error(str(e))
        raise typer.Exit(1) from None

    provider = ConsoleProvider(console, bot_label=couchchat_config.bot.name)
    bot = Bot.from_config(couchchat_config, provider)
    provider.set_ready_check(bot.wait_for_input)

    try:
        if message:
            await provider.submit(bot.handle_message, message)
        await bot.start()
    finally:
        await bot.stop()
