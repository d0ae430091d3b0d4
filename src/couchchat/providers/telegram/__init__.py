"""Telegram provider."""

from couchchat.providers.telegram.provider import TelegramProvider, split_message

__all__ = [
    "TelegramProvider",
    "split_message",
]
