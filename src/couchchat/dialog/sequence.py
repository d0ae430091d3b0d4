"""Runs prompt steps one after another, stopping at the first cancellation."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import StrEnum
from typing import Generic, TypeVar

from couchchat.dialog.types import CANCELLED, Cancelled, PromptOutcome

logger = logging.getLogger(__name__)

A = TypeVar("A")

# A step asks one question and records the answer on the accumulator.
PromptStep = Callable[[A], Awaitable[PromptOutcome]]


class WorkflowState(StrEnum):
    """Where a workflow is in its step sequence."""

    AWAITING_INPUT = "awaiting_input"
    COMPLETE = "complete"
    ABORTED = "aborted"


class SequentialPrompter(Generic[A]):
    """Executes prompt steps strictly in order.

    Step ``i + 1`` starts only after step ``i`` has resolved. If a step
    yields Cancelled the remaining steps are skipped and ``run`` returns
    Cancelled instead of the accumulator. A prompter is single-use.
    """

    def __init__(self, name: str = "workflow") -> None:
        self.name = name
        self.state = WorkflowState.AWAITING_INPUT
        self.step_index = 0

    async def run(self, steps: Sequence[PromptStep[A]], accumulator: A) -> A | Cancelled:
        if self.state is not WorkflowState.AWAITING_INPUT or self.step_index:
            raise RuntimeError(f"{self.name} prompter has already run")

        for step in steps:
            outcome = await step(accumulator)
            if isinstance(outcome, Cancelled):
                self.state = WorkflowState.ABORTED
                logger.debug(
                    f"{self.name}: cancelled at step {self.step_index + 1}/{len(steps)}"
                )
                return CANCELLED
            self.step_index += 1

        self.state = WorkflowState.COMPLETE
        return accumulator
