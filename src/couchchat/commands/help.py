"""The ``cloudant help`` command."""

from __future__ import annotations

import logging
import re
from typing import Any

from couchchat.commands.base import CommandContext
from couchchat.commands.router import Command, CommandRouter

logger = logging.getLogger(__name__)

HELP_ID = "cloudant.help"
HELP = re.compile(r"cloudant+\s+help", re.IGNORECASE)


def register(router: CommandRouter) -> None:
    """Register the help command."""

    async def show_help(ctx: CommandContext) -> None:
        logger.info("Listing help for Cloudant commands.")
        await ctx.reply("\n" + "\n".join(router.help_lines()))

    async def on_help(ctx: CommandContext, match: re.Match[str]) -> None:
        await show_help(ctx)

    async def on_help_intent(ctx: CommandContext, parameters: dict[str, Any]) -> None:
        await show_help(ctx)

    router.register(Command(HELP_ID, HELP, on_help, on_help_intent))
