"""Local terminal provider for talking to the bot without a chat service."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.text import Text

from couchchat.formatting import render_attachment
from couchchat.providers.base import (
    IncomingMessage,
    MessageHandler,
    OutgoingMessage,
    Provider,
)

logger = logging.getLogger(__name__)

QUIT_WORDS = ("quit", "/quit")

ReadyCheck = Callable[[tuple[str, str]], Awaitable[None]]


class ConsoleProvider(Provider):
    """Reads messages from stdin and prints replies with rich.

    Every line typed is one message from a single local user. ``quit`` ends
    the session; the dialog exit word is passed through to the bot.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        user_id: str = "console",
        chat_id: str = "console",
        username: str = "you",
        bot_label: str = "couchchat",
    ):
        self._console = console or Console()
        self._user_id = user_id
        self._chat_id = chat_id
        self._username = username
        self._bot_label = bot_label
        self._ids = itertools.count(1)
        self._running = False
        self._ready_check: ReadyCheck | None = None

    @property
    def name(self) -> str:
        return "console"

    def set_ready_check(self, check: ReadyCheck) -> None:
        """Awaited after each message, before reading the next line."""
        self._ready_check = check

    def make_message(self, text: str) -> IncomingMessage:
        return IncomingMessage(
            id=str(next(self._ids)),
            chat_id=self._chat_id,
            user_id=self._user_id,
            text=text,
            username=self._username,
            timestamp=datetime.now(UTC),
        )

    async def submit(self, handler: MessageHandler, text: str) -> None:
        """Hand one line to ``handler`` and wait until the bot is ready for more."""
        message = self.make_message(text)
        await handler(message)
        if self._ready_check:
            await self._ready_check(message.conversation_key)

    async def start(self, handler: MessageHandler) -> None:
        self._running = True
        self._console.print(
            Panel(
                f"[bold]{self._bot_label}[/bold]\n\n"
                "Type a command such as 'cloudant help' and press Enter. "
                "Type 'quit' to end the session.",
                title="Welcome",
                border_style="blue",
            )
        )
        while self._running:
            try:
                text = await asyncio.to_thread(
                    self._console.input, "[bold cyan]You:[/bold cyan] "
                )
            except EOFError:
                break
            text = text.strip()
            if not text:
                continue
            if text.lower() in QUIT_WORDS:
                self._console.print("\n[dim]Goodbye![/dim]")
                break
            await self.submit(handler, text)
        self._running = False

    async def stop(self) -> None:
        self._running = False

    async def send(self, message: OutgoingMessage) -> str:
        message_id = f"out-{next(self._ids)}"
        self._console.print(f"[bold green]{self._bot_label}:[/bold green]")
        if message.text:
            self._console.print(Markdown(message.text))
        for attachment in message.attachments:
            self._console.print(
                Panel(
                    Text(render_attachment(attachment, markdown=False)),
                    border_style="green",
                    expand=False,
                )
            )
        self._console.print()
        logger.debug(f"Printed message {message_id}")
        return message_id
