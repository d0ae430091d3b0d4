"""Bot runtime: wires a provider to the command router and dialog switchboard."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from couchchat.cloudant import CloudantClient
from couchchat.commands import (
    CommandContext,
    CommandRouter,
    build_router,
    register_entity_functions,
)
from couchchat.dialog.switchboard import ConversationKey, DialogBusyError, Switchboard
from couchchat.messages import t
from couchchat.providers.base import IncomingMessage, Provider

if TYPE_CHECKING:
    from couchchat.config import CouchChatConfig

logger = logging.getLogger(__name__)

SHUTDOWN_GRACE_SECONDS = 5.0
INPUT_POLL_INTERVAL_SECONDS = 0.05


class Bot:
    """Routes incoming messages to waiting dialogs or to commands.

    A message is first offered to the switchboard; if a dialog in the same
    (chat, user) conversation is waiting, it consumes the message. Otherwise
    the message is matched against the command router and the command runs
    as its own task so the provider keeps receiving replies meanwhile.
    """

    def __init__(
        self,
        provider: Provider,
        client: CloudantClient,
        *,
        router: CommandRouter | None = None,
        bot_name: str = "couchchat",
        exit_word: str = "exit",
    ):
        self.provider = provider
        self.client = client
        self.router = router or build_router(bot_name)
        self.switchboard = Switchboard()
        self.bot_name = bot_name
        self.exit_word = exit_word
        self._tasks: dict[ConversationKey, set[asyncio.Task[None]]] = {}
        self._locks: dict[ConversationKey, asyncio.Lock] = {}

        register_entity_functions(self.router.entities, client)

    @classmethod
    def from_config(cls, config: CouchChatConfig, provider: Provider) -> Bot:
        return cls(
            provider,
            CloudantClient(config.cloudant),
            bot_name=config.bot.name,
            exit_word=config.bot.exit_word,
        )

    @property
    def pending_tasks(self) -> int:
        return sum(len(tasks) for tasks in self._tasks.values())

    def context(self, message: IncomingMessage) -> CommandContext:
        return CommandContext(
            message,
            self.provider.send,
            self.client,
            self.switchboard,
            self.router.entities,
            bot_name=self.bot_name,
            exit_word=self.exit_word,
        )

    async def handle_message(self, message: IncomingMessage) -> None:
        """Provider callback for every incoming message."""
        if not message.text or not message.text.strip():
            return

        if self.switchboard.offer(message):
            logger.debug(f"Reply consumed by dialog in {message.conversation_key}")
            return

        if self.router.match(message.text) is None:
            logger.debug(f"No command matched: {message.text[:80]}")
            return

        ctx = self.context(message)
        self._spawn(ctx, lambda: self.router.dispatch(ctx))

    def handle_intent(
        self,
        message: IncomingMessage,
        intent_id: str,
        parameters: dict[str, Any] | None = None,
    ) -> asyncio.Task[None]:
        """Run the command for an intent classified outside the bot."""
        ctx = self.context(message)
        return self._spawn(
            ctx, lambda: self.router.dispatch_intent(ctx, intent_id, parameters)
        )

    def _spawn(
        self, ctx: CommandContext, command: Callable[[], Awaitable[Any]]
    ) -> asyncio.Task[None]:
        """Run ``command`` once earlier commands in the same conversation finish.

        Commands in one conversation run one at a time, so a command that
        arrives while another is still working starts its dialog afterwards
        instead of racing it for the user's replies.
        """
        message = ctx.message
        key = message.conversation_key
        lock = self._locks.setdefault(key, asyncio.Lock())

        async def run() -> None:
            async with lock:
                try:
                    await command()
                except DialogBusyError:
                    logger.warning(f"Prompt refused while another dialog waits in {key}")
                    await ctx.reply(t("dialog.busy", self.exit_word))
                except Exception:
                    logger.exception(f"Command failed for message: {message.text[:80]}")

        task = asyncio.create_task(run())
        self._tasks.setdefault(key, set()).add(task)
        task.add_done_callback(lambda done: self._forget(key, done))
        return task

    def _forget(self, key: ConversationKey, task: asyncio.Task[None]) -> None:
        tasks = self._tasks.get(key)
        if tasks is None:
            return
        tasks.discard(task)
        if not tasks:
            del self._tasks[key]
            self._locks.pop(key, None)

    def _all_tasks(self) -> list[asyncio.Task[None]]:
        return [task for tasks in self._tasks.values() for task in tasks]

    async def wait_idle(self) -> None:
        """Wait for every running command to finish."""
        while self._tasks:
            await asyncio.gather(*self._all_tasks(), return_exceptions=True)

    async def wait_for_input(self, key: ConversationKey) -> None:
        """Wait until the commands in ``key`` finish or one of them waits for a reply."""
        while self._tasks.get(key) and not self.switchboard.is_waiting(key):
            await asyncio.sleep(INPUT_POLL_INTERVAL_SECONDS)

    async def start(self) -> None:
        logger.info(f"Starting {self.bot_name} on {self.provider.name}")
        await self.provider.start(self.handle_message)

    async def stop(self) -> None:
        """Cancel waiting dialogs, let commands finish, then stop the provider."""
        closed = self.switchboard.close_all()
        if closed:
            logger.info(f"Cancelled {closed} waiting dialogs")

        running = self._all_tasks()
        if running:
            _, pending = await asyncio.wait(running, timeout=SHUTDOWN_GRACE_SECONDS)
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        await self.provider.stop()
        logger.info("Bot stopped")
