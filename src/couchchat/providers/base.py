"""Message types and the interface every chat provider implements."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class AttachmentField:
    """A titled value shown inside an attachment."""

    title: str
    value: str
    short: bool = True


@dataclass
class Attachment:
    """Structured block rendered by the provider (title, body, fields)."""

    title: str | None = None
    text: str | None = None
    color: str | None = None
    fields: list[AttachmentField] = field(default_factory=list)


@dataclass
class IncomingMessage:
    """Message received from a provider."""

    id: str
    chat_id: str
    user_id: str
    text: str
    username: str | None = None
    display_name: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime | None = None

    @property
    def conversation_key(self) -> tuple[str, str]:
        """Key identifying the (chat, user) conversation this message belongs to."""
        return self.chat_id, self.user_id


@dataclass
class OutgoingMessage:
    """Message to send via a provider."""

    chat_id: str
    text: str = ""
    attachments: list[Attachment] = field(default_factory=list)
    reply_to_message_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


# Called once per incoming message
MessageHandler = Callable[[IncomingMessage], Awaitable[None]]


class Provider(ABC):
    """A chat service the bot talks through.

    Implementations deliver every text message to the handler given to
    start() and render OutgoingMessage (text plus attachments) in whatever
    form the service supports.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in logs, e.g. "telegram"."""

    @abstractmethod
    async def start(self, handler: MessageHandler) -> None:
        """Receive messages until stop() is called or the input ends."""

    @abstractmethod
    async def stop(self) -> None: ...

    @abstractmethod
    async def send(self, message: OutgoingMessage) -> str:
        """Deliver ``message`` and return the id of the last message sent."""
