"""Prompt requests and outcomes shared by every dialog workflow."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

# Free-text prompts accept anything; the workflow interprets the reply.
CATCH_ALL = re.compile(r"(.*)", re.DOTALL)
YES_NO = re.compile(r"^(yes|no)$", re.IGNORECASE)
DESIGN_VIEW = re.compile(r"^(\S+):(\S+)$")


@dataclass(frozen=True, slots=True)
class PromptRequest:
    """A question and the pattern a reply must match to be accepted."""

    text: str
    pattern: re.Pattern[str]

    def match(self, reply: str) -> re.Match[str] | None:
        return self.pattern.search(reply)


@dataclass(frozen=True, slots=True)
class Answered:
    """The user replied with text matching the prompt's pattern."""

    text: str
    groups: tuple[str, ...] = ()

    def group(self, index: int) -> str:
        """Capture group by 1-based index, stripped."""
        return self.groups[index - 1].strip()


@dataclass(frozen=True, slots=True)
class Cancelled:
    """The user opted out, or the conversation went away."""


CANCELLED = Cancelled()

PromptOutcome = Answered | Cancelled


class PromptChannel(Protocol):
    """Asks one user a question and waits for an acceptable reply.

    Implementations keep re-asking until the reply matches ``pattern`` and
    only return once per call, with either an answer or a cancellation.
    """

    async def ask(self, text: str, pattern: re.Pattern[str]) -> PromptOutcome: ...
