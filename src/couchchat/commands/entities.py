"""Entity value lookups for natural-language intent parameters.

An intent classifier asks for the candidate values of a parameter (the
names of the databases, the views of a database) through these lookups.
They are registered once, when the bot is assembled.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from couchchat.cloudant.client import CloudantClient

logger = logging.getLogger(__name__)

NAMESPACE = "cloudant"
PARAM_DATABASENAME = "databasename"
PARAM_VIEWNAME = "viewname"

EntityFunction = Callable[[dict[str, Any]], Awaitable[list[str]]]


def global_name(parameter_name: str) -> str:
    return f"{NAMESPACE}_{parameter_name}"


class EntityRegistry:
    """Lookup functions and last-known values per global parameter name."""

    def __init__(self) -> None:
        self._functions: dict[str, EntityFunction] = {}
        self._values: dict[str, list[str]] = {}

    def register_function(self, name: str, function: EntityFunction) -> None:
        """Register a lookup.

        Raises:
            ValueError: If a lookup is already registered under ``name``.
        """
        if name in self._functions:
            raise ValueError(f"Entity function '{name}' already registered")
        self._functions[name] = function

    def has_function(self, name: str) -> bool:
        return name in self._functions

    async def lookup(self, name: str, parameters: dict[str, Any] | None = None) -> list[str]:
        """Run the lookup registered under ``name``.

        Raises:
            KeyError: If no lookup is registered.
        """
        if name not in self._functions:
            raise KeyError(f"Entity function '{name}' not found")
        return await self._functions[name](dict(parameters or {}))

    def update_values(self, name: str, values: list[str]) -> None:
        self._values[name] = list(values)

    def values(self, name: str) -> list[str]:
        return list(self._values.get(name, []))


def register_entity_functions(registry: EntityRegistry, client: CloudantClient) -> None:
    """Register the database and view name lookups backed by ``client``."""

    async def database_names(parameters: dict[str, Any]) -> list[str]:
        names = await client.list_databases()
        registry.update_values(global_name(PARAM_DATABASENAME), names)
        return names

    async def view_names(parameters: dict[str, Any]) -> list[str]:
        database = parameters.get(PARAM_DATABASENAME)
        if not database:
            raise ValueError(
                "Unable to get view names for a database because the database "
                "name has not been set"
            )
        views = await client.list_views(database)
        return [view.qualified_name for view in views]

    registry.register_function(global_name(PARAM_DATABASENAME), database_names)
    registry.register_function(global_name(PARAM_VIEWNAME), view_names)
    logger.debug("Registered entity functions")
