"""Cloudant chat commands."""

from couchchat.commands import databases, help, permissions, views
from couchchat.commands.base import CommandContext, log_cloudant_error
from couchchat.commands.entities import EntityRegistry, register_entity_functions
from couchchat.commands.router import Command, CommandRouter


def build_router(bot_name: str = "couchchat") -> CommandRouter:
    """Create a router with every Cloudant command registered."""
    router = CommandRouter(bot_name)
    for module in (databases, permissions, views, help):
        module.register(router)
    return router


__all__ = [
    "Command",
    "CommandContext",
    "CommandRouter",
    "EntityRegistry",
    "build_router",
    "log_cloudant_error",
    "register_entity_functions",
]
