"""Telegram provider using aiogram."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from aiogram import Bot, Dispatcher, F
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import Message as TelegramMessage

from couchchat.formatting import render_attachments
from couchchat.providers.base import (
    IncomingMessage,
    MessageHandler,
    OutgoingMessage,
    Provider,
)

logger = logging.getLogger("telegram")

PREVIEW_LEN = 180
# Telegram rejects messages over 4096 characters; Markdown markup counts too.
MAX_SEND_LENGTH = 4000
FENCE = "```"
GROUP_CHATS = ("group", "supergroup")


def _preview(text: str) -> str:
    """First line of ``text``, shortened for log lines."""
    line, newline, _ = text.partition("\n")
    if len(line) > PREVIEW_LEN or newline:
        return line[:PREVIEW_LEN] + "..."
    return line


def _safe_breaks(text: str, limit: int) -> tuple[int, int]:
    """Last paragraph break and last line break before ``limit``.

    Breaks inside fenced code blocks are skipped so a JSON row rendered by
    an attachment is never cut in half. Positions point just past the
    newline; -1 means none was found.
    """
    paragraph = line = -1
    fenced = False
    pos = 0
    while pos < limit:
        if text.startswith(FENCE, pos):
            fenced = not fenced
            pos += len(FENCE)
            continue
        if text[pos] == "\n" and not fenced:
            if text.startswith("\n\n", pos) and pos + 1 < limit:
                paragraph = pos + 1
            else:
                line = pos + 1
        pos += 1
    return paragraph, line


def split_message(text: str, max_length: int = MAX_SEND_LENGTH) -> list[str]:
    """Split text into chunks that each fit in one Telegram message.

    Splits prefer blank lines (between attachments), then single newlines,
    and fall back to a hard cut at ``max_length``.
    """
    chunks: list[str] = []
    while len(text) > max_length:
        paragraph, line = _safe_breaks(text, max_length)
        cut = next((p for p in (paragraph, line) if p > 0), max_length)
        chunks.append(text[:cut].rstrip())
        text = text[cut:].lstrip()
    if text or not chunks:
        chunks.append(text)
    return chunks


def message_text(message: OutgoingMessage) -> str:
    """Flatten text and attachments into one Markdown body."""
    parts = [message.text] if message.text else []
    if message.attachments:
        parts.append(render_attachments(message.attachments, markdown=True))
    return "\n\n".join(parts)


@dataclass
class ChatAccess:
    """Decides which Telegram messages reach the bot.

    Private chats are limited to ``allowed_users`` (``@name`` or numeric id),
    groups to ``allowed_groups``; empty lists allow everyone. In ``mention``
    mode a group message must mention the bot or reply to one of its
    messages, which is how users answer a dialog prompt in a group.
    """

    allowed_users: set[str] = field(default_factory=set)
    allowed_groups: set[str] = field(default_factory=set)
    group_mode: str = "mention"
    bot_username: str | None = None
    bot_id: int | None = None

    def user_allowed(self, user_id: int, username: str | None) -> bool:
        if not self.allowed_users:
            return True
        if str(user_id) in self.allowed_users:
            return True
        return username is not None and f"@{username}" in self.allowed_users

    def group_allowed(self, chat_id: int) -> bool:
        return not self.allowed_groups or str(chat_id) in self.allowed_groups

    def mentioned(self, text: str | None) -> bool:
        if not self.bot_username or not text:
            return False
        return f"@{self.bot_username.lower()}" in text.lower()

    def replied_to_bot(self, message: TelegramMessage) -> bool:
        target = message.reply_to_message
        if target is None:
            return False
        if self.bot_id is None:
            # Identity unknown until get_me() succeeds; accept any reply
            return True
        return target.from_user is not None and target.from_user.id == self.bot_id

    def strip_mention(self, text: str) -> str:
        if not self.bot_username:
            return text
        mention = re.compile(rf"@{re.escape(self.bot_username)}\b", re.IGNORECASE)
        return mention.sub("", text).strip()

    def skip_reason(self, message: TelegramMessage) -> str | None:
        """Why ``message`` is ignored, or None if it should be handled."""
        user = message.from_user
        if user is None:
            return "no_user"
        if message.chat.type not in GROUP_CHATS:
            if not self.user_allowed(user.id, user.username):
                return "user_not_allowed"
            return None
        if not self.group_allowed(message.chat.id):
            return "group_not_allowed"
        if self.group_mode == "mention" and not (
            self.mentioned(message.text) or self.replied_to_bot(message)
        ):
            return "not_mentioned_or_reply"
        return None


class TelegramProvider(Provider):
    """Long-polls Telegram with aiogram 3 and relays text messages."""

    def __init__(
        self,
        bot_token: str,
        allowed_users: list[str] | None = None,
        allowed_groups: list[str] | None = None,
        group_mode: str = "mention",
    ):
        self.access = ChatAccess(
            allowed_users=set(allowed_users or ()),
            allowed_groups=set(allowed_groups or ()),
            group_mode=group_mode,
        )
        self._bot = Bot(
            token=bot_token,
            default=DefaultBotProperties(parse_mode=ParseMode.MARKDOWN),
        )
        self._dp = Dispatcher()
        self._dp.message.register(self._on_message, F.text)
        self._handler: MessageHandler | None = None
        self._polling = False

    @property
    def name(self) -> str:
        return "telegram"

    @property
    def bot_username(self) -> str | None:
        return self.access.bot_username

    def _to_incoming_message(self, message: TelegramMessage, text: str) -> IncomingMessage:
        user = message.from_user
        return IncomingMessage(
            id=str(message.message_id),
            chat_id=str(message.chat.id),
            user_id=str(user.id) if user else "",
            text=text,
            username=user.username if user else None,
            display_name=user.full_name if user else None,
            metadata={"chat_type": message.chat.type, "chat_title": message.chat.title},
            timestamp=message.date,
        )

    async def _on_message(self, message: TelegramMessage) -> None:
        if not message.text or self._handler is None:
            return

        reason = self.access.skip_reason(message)
        logger.debug(
            f"Incoming message chat={message.chat.id} "
            f"skip_reason={reason}: {_preview(message.text)}"
        )
        if reason:
            return

        text = message.text
        if message.chat.type in GROUP_CHATS:
            text = self.access.strip_mention(text)
        try:
            await self._handler(self._to_incoming_message(message, text))
        except Exception:
            logger.exception("Error handling message")

    async def _resolve_identity(self) -> None:
        try:
            me = await self._bot.get_me()
        except Exception as e:
            logger.warning(f"Failed to get bot info: {e}")
            return
        self.access.bot_username = me.username
        self.access.bot_id = me.id
        logger.info(f"Telegram bot username resolved: @{me.username}")

    async def start(self, handler: MessageHandler) -> None:
        """Poll Telegram until stop() is called."""
        self._handler = handler
        await self._resolve_identity()
        # Polling and webhooks are mutually exclusive
        await self._bot.delete_webhook(drop_pending_updates=False)

        self._polling = True
        logger.info("Starting Telegram polling")
        # Signals are handled by the CLI
        await self._dp.start_polling(
            self._bot, handle_signals=False, close_bot_session=False
        )

    async def stop(self) -> None:
        if not self._polling:
            return
        self._polling = False

        for step, action in (
            ("stopping polling", self._dp.stop_polling),
            ("closing bot session", self._bot.session.close),
        ):
            try:
                await action()
            except Exception as e:
                logger.debug(f"Error {step}: {e}")
        logger.info("Telegram bot stopped")

    async def send(self, message: OutgoingMessage) -> str:
        """Send a message, split across several Telegram messages if long.

        Only the first part replies to the original message. Returns the id
        of the last message sent.
        """
        reply_to = int(message.reply_to_message_id) if message.reply_to_message_id else None
        last_id = ""
        for chunk in split_message(message_text(message)):
            if not chunk:
                continue
            last_id = await self._send_with_fallback(int(message.chat_id), chunk, reply_to)
            reply_to = None
        return last_id

    async def _send_with_fallback(
        self, chat_id: int, text: str, reply_to: int | None = None
    ) -> str:
        """Send Markdown, retrying as plain text or without the reply on known errors."""
        kwargs = {
            "chat_id": chat_id,
            "text": text,
            "reply_to_message_id": reply_to,
            "parse_mode": ParseMode.MARKDOWN,
        }
        try:
            sent = await self._bot.send_message(**kwargs)
        except TelegramBadRequest as e:
            error = str(e).lower()
            if "can't parse" in error:
                logger.debug(f"Markdown rejected, resending as plain text: {e}")
                kwargs["parse_mode"] = None
            elif "message to be replied not found" in error and reply_to is not None:
                logger.debug(f"Reply target gone, resending without reply: {e}")
                kwargs["reply_to_message_id"] = None
            else:
                raise
            sent = await self._bot.send_message(**kwargs)

        logger.debug(f"Sent message to chat {chat_id}: {_preview(text)}")
        return str(sent.message_id)
