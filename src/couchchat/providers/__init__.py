"""Communication providers."""

from couchchat.providers.base import (
    Attachment,
    AttachmentField,
    IncomingMessage,
    MessageHandler,
    OutgoingMessage,
    Provider,
)
from couchchat.providers.console import ConsoleProvider
from couchchat.providers.telegram import TelegramProvider

__all__ = [
    # Base
    "Attachment",
    "AttachmentField",
    "IncomingMessage",
    "MessageHandler",
    "OutgoingMessage",
    "Provider",
    # Providers
    "ConsoleProvider",
    "TelegramProvider",
]
