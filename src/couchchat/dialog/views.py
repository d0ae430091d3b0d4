"""Interactive selection of a view and the keys to run it with."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from couchchat.dialog.types import (
    CANCELLED,
    CATCH_ALL,
    DESIGN_VIEW,
    Cancelled,
    PromptChannel,
)
from couchchat.messages import t

logger = logging.getLogger(__name__)

NONE_TEXT = "none"
KEY_SEPARATOR = re.compile(r",\s*")


@dataclass(frozen=True, slots=True)
class ViewReference:
    """A view in a database, addressed by design document and view name."""

    database: str
    design: str
    view: str

    @property
    def qualified_name(self) -> str:
        return f"{self.design}:{self.view}"

    @classmethod
    def parse(cls, database: str, text: str | None) -> ViewReference | None:
        """Build from ``design:view``; None if ``text`` is absent or malformed."""
        if not text:
            return None
        match = DESIGN_VIEW.search(text.strip())
        if match is None:
            return None
        return cls(database=database, design=match.group(1), view=match.group(2))


def parse_keys(reply: str) -> list[str]:
    """Split a comma separated key list, keeping order and duplicates."""
    if not reply:
        return []
    return KEY_SEPARATOR.split(reply)


class ViewSelector:
    """Resolves which view to run on a database and with which keys."""

    def __init__(
        self,
        channel: PromptChannel,
        database: str,
        *,
        exit_word: str = "exit",
    ):
        self._channel = channel
        self._database = database
        self._exit_word = exit_word.lower()

    async def resolve_view(self, supplied_text: str | None) -> ViewReference | Cancelled:
        """Use ``supplied_text`` when it is a valid ``design:view``, else ask."""
        reference = ViewReference.parse(self._database, supplied_text)
        if reference is not None:
            return reference
        if supplied_text:
            logger.debug(
                f"Entered view name is ignored since it is not valid: {supplied_text}"
            )

        outcome = await self._channel.ask(t("runview.view.prompt"), DESIGN_VIEW)
        if isinstance(outcome, Cancelled):
            return outcome
        return ViewReference(
            database=self._database,
            design=outcome.group(1),
            view=outcome.group(2),
        )

    async def resolve_keys(self, view_name: str) -> list[str] | Cancelled:
        """Ask for the keys; ``none`` or an empty reply means no filtering."""
        prompt = t("runview.keys.prompt", view_name, NONE_TEXT, self._exit_word)
        outcome = await self._channel.ask(prompt, CATCH_ALL)
        if isinstance(outcome, Cancelled):
            return outcome

        reply = outcome.group(1)
        if not reply or reply.lower() == NONE_TEXT:
            return []
        if reply.lower() == self._exit_word:
            logger.debug(f"User is choosing to terminate the command with reply [{reply}]")
            return CANCELLED

        keys = parse_keys(reply)
        logger.debug(f"Keys entered are {keys}")
        return keys
