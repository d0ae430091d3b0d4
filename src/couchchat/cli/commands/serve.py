"""Server command for running the bot on Telegram."""

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer

from couchchat.cli.console import error

logger = logging.getLogger(__name__)


def register(app: typer.Typer) -> None:
    """Register the serve command."""

    @app.command()
    def serve(
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option(
                "--log-level",
                "-l",
                help="Log level (default: COUCHCHAT_LOG_LEVEL env or INFO)",
            ),
        ] = None,
    ) -> None:
        """Start the bot and poll Telegram for messages."""
        try:
            asyncio.run(_run_server(config, log_level))
        except KeyboardInterrupt:
            # Use print here since logging may not be configured yet
            print("\nServer stopped")


async def _run_server(config_path: Path | None = None, log_level: str | None = None) -> None:
    """Run the bot until Telegram polling stops or a signal arrives."""
    import signal as signal_module

    from couchchat.config import ConfigError, TelegramConfig, load_config
    from couchchat.logging import configure_logging
    from couchchat.providers.telegram import TelegramProvider
    from couchchat.runtime import Bot

    configure_logging(level=log_level, use_rich=True, log_to_file=True)

    logger.info("Loading configuration")
    try:
        couchchat_config = load_config(config_path)
        bot_token = couchchat_config.require_telegram_token()
    except (FileNotFoundError, ConfigError) as e:
        error(str(e))
        raise typer.Exit(1) from None

    if not couchchat_config.cloudant.get_base_url():
        logger.warning(
            "The CLOUDANT_ENDPOINT is not set; Cloudant commands will fail until it is."
        )

    telegram = couchchat_config.telegram or TelegramConfig()
    provider = TelegramProvider(
        bot_token=bot_token,
        allowed_users=telegram.allowed_users,
        allowed_groups=telegram.allowed_groups,
        group_mode=telegram.group_mode,
    )
    bot = Bot.from_config(couchchat_config, provider)

    loop = asyncio.get_running_loop()
    polling_task: asyncio.Task | None = None

    def handle_signal() -> None:
        logger.info("Shutting down")
        if polling_task and not polling_task.done():
            polling_task.cancel()

    for sig in (signal_module.SIGTERM, signal_module.SIGINT):
        loop.add_signal_handler(sig, handle_signal)

    polling_task = asyncio.create_task(bot.start())
    try:
        await polling_task
    except asyncio.CancelledError:
        logger.info("Telegram polling cancelled")
    finally:
        await bot.stop()
