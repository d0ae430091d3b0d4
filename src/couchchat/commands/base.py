"""Shared plumbing for chat command handlers."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from couchchat.cloudant.errors import CloudantConfigError
from couchchat.dialog.channel import ConversationPromptChannel
from couchchat.providers.base import Attachment, IncomingMessage, OutgoingMessage

if TYPE_CHECKING:
    from couchchat.cloudant.client import CloudantClient
    from couchchat.commands.entities import EntityRegistry
    from couchchat.dialog.switchboard import Switchboard

logger = logging.getLogger(__name__)

SendMessage = Callable[[OutgoingMessage], Awaitable[str]]


class CommandContext:
    """Everything a handler needs to answer one incoming message."""

    def __init__(
        self,
        message: IncomingMessage,
        send: SendMessage,
        client: CloudantClient,
        switchboard: Switchboard,
        entities: EntityRegistry,
        *,
        bot_name: str = "couchchat",
        exit_word: str = "exit",
    ):
        self.message = message
        self.client = client
        self.switchboard = switchboard
        self.entities = entities
        self.bot_name = bot_name
        self.exit_word = exit_word
        self._send = send

    async def reply(self, text: str) -> str:
        return await self._send(
            OutgoingMessage(
                chat_id=self.message.chat_id,
                text=text,
                reply_to_message_id=self.message.id,
            )
        )

    async def send_attachments(self, attachments: list[Attachment]) -> str:
        return await self._send(
            OutgoingMessage(chat_id=self.message.chat_id, attachments=attachments)
        )

    def prompt_channel(self) -> ConversationPromptChannel:
        """A fresh prompt channel bound to this message's conversation."""
        return ConversationPromptChannel(
            self.switchboard,
            self.message.conversation_key,
            self.reply,
            exit_word=self.exit_word,
        )


def log_cloudant_error(
    log: logging.Logger, err: Exception, generic_message: str
) -> None:
    """Log a failed Cloudant call.

    Missing configuration is logged as-is without a traceback; anything else
    gets the generic message and the traceback.
    """
    if isinstance(err, CloudantConfigError):
        log.error(str(err))
    else:
        log.error(f"{generic_message} err={err}.", exc_info=err)
