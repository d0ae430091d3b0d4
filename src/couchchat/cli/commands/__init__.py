"""CLI command modules."""

from couchchat.cli.commands import chat, config, serve

__all__ = [
    "chat",
    "config",
    "serve",
]
