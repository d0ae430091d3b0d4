"""Dispatches chat text and natural-language intents to command handlers."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from couchchat.commands.base import CommandContext
from couchchat.commands.entities import EntityRegistry

logger = logging.getLogger(__name__)

RegexHandler = Callable[[CommandContext, re.Match[str]], Awaitable[None]]
IntentHandler = Callable[[CommandContext, dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True)
class Command:
    """A chat command reachable by regex and, optionally, by intent id."""

    id: str
    pattern: re.Pattern[str]
    handler: RegexHandler
    intent_handler: IntentHandler | None = None
    help_line: str | None = None


class CommandRouter:
    """Registry of commands, matched in registration order."""

    def __init__(self, bot_name: str = "couchchat") -> None:
        self.bot_name = bot_name
        self.entities = EntityRegistry()
        self._commands: dict[str, Command] = {}
        self._addressed = re.compile(
            rf"^\s*/?@?{re.escape(bot_name)}\b[:,]?\s*", re.IGNORECASE
        )

    def register(self, command: Command) -> None:
        """Register a command.

        Raises:
            ValueError: If a command with the same id is already registered.
        """
        if command.id in self._commands:
            raise ValueError(f"Command '{command.id}' already registered")
        self._commands[command.id] = command
        logger.debug(f"Registered command: {command.id}")

    @property
    def commands(self) -> list[Command]:
        return list(self._commands.values())

    def get(self, command_id: str) -> Command | None:
        return self._commands.get(command_id)

    def normalize(self, text: str) -> str:
        """Strip a leading slash or bot-name address from ``text``."""
        text = self._addressed.sub("", text, count=1)
        return text.strip().lstrip("/")

    def match(self, text: str) -> tuple[Command, re.Match[str]] | None:
        normalized = self.normalize(text)
        for command in self._commands.values():
            if found := command.pattern.match(normalized):
                return command, found
        return None

    async def dispatch(self, ctx: CommandContext) -> bool:
        """Run the command matching the message text.

        Returns:
            True if a command matched.
        """
        matched = self.match(ctx.message.text)
        if matched is None:
            return False
        command, found = matched
        logger.debug(
            f"{command.id} - RegEx match - text={ctx.message.text}"
        )
        await command.handler(ctx, found)
        return True

    async def dispatch_intent(
        self,
        ctx: CommandContext,
        intent_id: str,
        parameters: dict[str, Any] | None = None,
    ) -> bool:
        """Run the command for a classified intent with extracted parameters.

        Returns:
            True if the intent is known.
        """
        command = self._commands.get(intent_id)
        if command is None or command.intent_handler is None:
            logger.warning(f"No handler for intent {intent_id}")
            return False
        logger.debug(
            f"{intent_id} - Natural Language match - text={ctx.message.text}"
        )
        await command.intent_handler(ctx, dict(parameters or {}))
        return True

    def help_lines(self) -> list[str]:
        return [
            f"{self.bot_name} {command.help_line}"
            for command in self._commands.values()
            if command.help_line
        ]
