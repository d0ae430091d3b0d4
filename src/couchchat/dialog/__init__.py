"""Multi-step chat dialogs: prompts, sequencing and the two workflows."""

from couchchat.dialog.channel import ConversationPromptChannel
from couchchat.dialog.permissions import (
    CAPABILITIES,
    Aborted,
    GrantCandidate,
    PermissionCollector,
    PermissionOutcome,
    Resolved,
)
from couchchat.dialog.sequence import PromptStep, SequentialPrompter, WorkflowState
from couchchat.dialog.switchboard import DialogBusyError, Switchboard
from couchchat.dialog.types import (
    CANCELLED,
    Answered,
    Cancelled,
    PromptChannel,
    PromptOutcome,
    PromptRequest,
)
from couchchat.dialog.views import ViewReference, ViewSelector

__all__ = [
    "CANCELLED",
    "CAPABILITIES",
    "Aborted",
    "Answered",
    "Cancelled",
    "ConversationPromptChannel",
    "DialogBusyError",
    "GrantCandidate",
    "PermissionCollector",
    "PermissionOutcome",
    "PromptChannel",
    "PromptOutcome",
    "PromptRequest",
    "PromptStep",
    "Resolved",
    "SequentialPrompter",
    "Switchboard",
    "ViewReference",
    "ViewSelector",
    "WorkflowState",
]
