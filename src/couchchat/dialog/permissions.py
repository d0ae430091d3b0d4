"""Interactive collection of the permissions to grant a user on a database."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from couchchat.dialog.sequence import PromptStep, SequentialPrompter
from couchchat.dialog.types import (
    CANCELLED,
    CATCH_ALL,
    YES_NO,
    Answered,
    Cancelled,
    PromptChannel,
    PromptOutcome,
)
from couchchat.messages import t

logger = logging.getLogger(__name__)

# Every capability is visited once, in this order.
CAPABILITIES: tuple[str, ...] = ("_reader", "_writer", "_replicator", "_admin")

GrantLookup = Callable[[str], Awaitable[Sequence[str]]]


@dataclass(frozen=True, slots=True)
class GrantCandidate:
    """A capability about to be offered, and whether the user already has it."""

    capability: str
    already_granted: bool


@dataclass(frozen=True, slots=True)
class Resolved:
    """Final grant list; empty means "grant nothing"."""

    user: str
    grants: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Aborted:
    """The user cancelled.

    ``user`` is None when the cancel came at the user-name prompt, before
    any permissions were looked up.
    """

    user: str | None = None

    @property
    def before_user(self) -> bool:
        return self.user is None


PermissionOutcome = Resolved | Aborted


def grant_candidates(current_grants: Sequence[str] | None) -> list[GrantCandidate]:
    current = set(current_grants or ())
    return [GrantCandidate(cap, cap in current) for cap in CAPABILITIES]


class PermissionCollector:
    """Asks which capabilities a user should hold on one database.

    One collector serves one command invocation. A cancel during the
    capability questions discards every earlier answer; a cancel at the
    user-name question aborts before the database is queried.
    """

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
        self.user: str | None = None

    async def resolve_user(self, target_user: str | None) -> str | Cancelled:
        """Use ``target_user`` if given, otherwise ask for one."""
        if target_user and target_user.strip():
            self.user = target_user.strip()
            return self.user

        prompt = t("setpermissions.user.prompt", self._database)
        outcome = await self._channel.ask(prompt, CATCH_ALL)
        if isinstance(outcome, Cancelled):
            return outcome

        reply = outcome.group(1)
        if not reply or reply.lower() == self._exit_word:
            return CANCELLED
        self.user = reply
        return reply

    async def collect_grants(
        self, user: str, current_grants: Sequence[str] | None
    ) -> PermissionOutcome:
        """Ask yes/no for each capability, keep/add wording per current grants."""
        steps = [self._grant_step(user, c) for c in grant_candidates(current_grants)]
        prompter: SequentialPrompter[list[str]] = SequentialPrompter("permissions")
        result = await prompter.run(steps, [])
        if isinstance(result, Cancelled):
            return Aborted(user=user)
        return Resolved(user=user, grants=tuple(result))

    async def collect(
        self,
        target_user: str | None,
        current_grants: Sequence[str] | GrantLookup | None,
    ) -> PermissionOutcome:
        """Resolve the user, then the grants.

        ``current_grants`` may be the user's current capabilities or an async
        lookup called with the resolved user name. Lookup errors propagate.
        """
        user = await self.resolve_user(target_user)
        if isinstance(user, Cancelled):
            return Aborted()

        if callable(current_grants):
            current = current_grants(user)
            if inspect.isawaitable(current):
                current = await current
        else:
            current = current_grants
        return await self.collect_grants(user, current)

    def _grant_step(self, user: str, candidate: GrantCandidate) -> PromptStep[list[str]]:
        key = (
            "setpermissions.permissions.keep.prompt"
            if candidate.already_granted
            else "setpermissions.permissions.add.prompt"
        )
        prompt = t(
            key,
            t(f"setpermissions.{candidate.capability}"),
            user,
            candidate.capability,
        )

        async def step(granted: list[str]) -> PromptOutcome:
            outcome = await self._channel.ask(prompt, YES_NO)
            if isinstance(outcome, Answered) and outcome.group(1).lower() == "yes":
                granted.append(candidate.capability)
            return outcome

        return step
