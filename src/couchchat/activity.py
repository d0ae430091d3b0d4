"""Bot activity events.

Completed commands are recorded as INFO records on the ``couchchat.activity``
logger. The JSONL log handler persists the activity id with the chat and
user that triggered it.
"""

import logging

from couchchat.providers.base import IncomingMessage

logger = logging.getLogger(__name__)


def emit_bot_activity(message: IncomingMessage, activity_id: str) -> None:
    """Record that the bot completed ``activity_id`` for ``message``'s sender."""
    logger.info(
        f"activity {activity_id}",
        extra={
            "activity_id": activity_id,
            "chat_id": message.chat_id,
            "user_id": message.user_id,
        },
    )
