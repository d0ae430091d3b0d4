"""Routes a user's next message to the dialog waiting for it."""

from __future__ import annotations

import asyncio
import logging

from couchchat.providers.base import IncomingMessage

logger = logging.getLogger(__name__)

ConversationKey = tuple[str, str]


class DialogBusyError(RuntimeError):
    """A second prompt was started while one is still waiting."""


class Switchboard:
    """Pending-reply registry keyed by (chat_id, user_id).

    Each conversation has at most one waiter. Incoming messages are offered
    here before command routing; a waiting dialog consumes the message.
    """

    def __init__(self) -> None:
        self._pending: dict[ConversationKey, asyncio.Future[str | None]] = {}

    def expect(self, key: ConversationKey) -> asyncio.Future[str | None]:
        """Register interest in the next message for ``key``.

        The future resolves with the message text, or None if the
        conversation is closed first.

        Raises:
            DialogBusyError: If a reply is already awaited for ``key``.
        """
        current = self._pending.get(key)
        if current is not None and not current.done():
            raise DialogBusyError(f"Already waiting for a reply in {key}")
        waiter: asyncio.Future[str | None] = asyncio.get_running_loop().create_future()
        self._pending[key] = waiter
        return waiter

    def offer(self, message: IncomingMessage) -> bool:
        """Hand ``message`` to a waiting dialog.

        Returns:
            True if a dialog consumed the message.
        """
        waiter = self._pending.pop(message.conversation_key, None)
        if waiter is None or waiter.done():
            return False
        waiter.set_result(message.text)
        return True

    def discard(self, key: ConversationKey, waiter: asyncio.Future[str | None]) -> None:
        """Forget ``waiter`` if it is still the one registered for ``key``."""
        if self._pending.get(key) is waiter:
            del self._pending[key]

    def close(self, key: ConversationKey) -> bool:
        """Resolve the waiter for ``key`` with None, cancelling its prompt."""
        waiter = self._pending.pop(key, None)
        if waiter is None or waiter.done():
            return False
        waiter.set_result(None)
        return True

    def close_all(self) -> int:
        """Close every pending conversation."""
        closed = 0
        for key in list(self._pending):
            if self.close(key):
                closed += 1
        if closed:
            logger.debug(f"Closed {closed} pending dialogs")
        return closed

    def is_waiting(self, key: ConversationKey) -> bool:
        waiter = self._pending.get(key)
        return waiter is not None and not waiter.done()

    def __len__(self) -> int:
        return sum(1 for waiter in self._pending.values() if not waiter.done())
