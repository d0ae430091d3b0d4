"""PromptChannel backed by a chat conversation."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from typing import Any

from couchchat.dialog.switchboard import ConversationKey, Switchboard
from couchchat.dialog.types import CANCELLED, Answered, PromptOutcome, PromptRequest

logger = logging.getLogger(__name__)

SendText = Callable[[str], Awaitable[Any]]


class ConversationPromptChannel:
    """Sends a prompt to one user and waits for a matching reply.

    A reply that does not match the prompt's pattern causes the same prompt
    to be sent again; this repeats until the reply matches, the user types
    the exit word, or the conversation is closed.
    """

    def __init__(
        self,
        switchboard: Switchboard,
        key: ConversationKey,
        send: SendText,
        *,
        exit_word: str = "exit",
    ):
        self._switchboard = switchboard
        self._key = key
        self._send = send
        self._exit_word = exit_word.lower()
        self.prompts_sent = 0

    @property
    def exit_word(self) -> str:
        return self._exit_word

    async def ask(self, text: str, pattern: re.Pattern[str]) -> PromptOutcome:
        request = PromptRequest(text=text, pattern=pattern)
        while True:
            # Register before sending so a fast reply is never missed
            waiter = self._switchboard.expect(self._key)
            try:
                await self._send(request.text)
                self.prompts_sent += 1
                reply = await waiter
            finally:
                self._switchboard.discard(self._key, waiter)

            if reply is None:
                logger.debug(f"Conversation {self._key} closed while waiting")
                return CANCELLED

            reply = reply.strip()
            logger.debug(f"Dialog reply is: {reply}")
            if reply.lower() == self._exit_word:
                logger.debug("User is choosing to terminate the command")
                return CANCELLED

            if match := request.match(reply):
                return Answered(
                    text=reply,
                    groups=tuple(group or "" for group in match.groups()),
                )

            logger.debug(f"Reply does not match {pattern.pattern!r}, asking again")
