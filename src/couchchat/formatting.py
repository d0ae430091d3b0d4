"""Response formatting helpers shared by commands and providers."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from couchchat.providers.base import Attachment

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


class Palette:
    """Attachment colors."""

    NORMAL = "#555"
    GOOD = "good"
    WARNING = "warning"
    DANGER = "danger"


def bytes_to_size(num_bytes: int | float | None) -> str:
    """Human readable size: 148920 -> '145 KB'."""
    if not num_bytes:
        return "0 Byte"
    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    # Round half up
    return f"{int(value + 0.5)} {SIZE_UNITS[index]}"


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=4, ensure_ascii=False)


def render_attachment(attachment: Attachment, *, markdown: bool = True) -> str:
    """Render one attachment as a block of chat text."""
    lines: list[str] = []
    if attachment.title:
        lines.append(f"*{attachment.title}*" if markdown else attachment.title)
    if attachment.text:
        if markdown and attachment.text.lstrip().startswith(("{", "[")):
            lines.append(f"```\n{attachment.text}\n```")
        else:
            lines.append(attachment.text)
    for field in attachment.fields:
        lines.append(f"{field.title}: {field.value}")
    return "\n".join(lines)


def render_attachments(attachments: list[Attachment], *, markdown: bool = True) -> str:
    """Render attachments separated by blank lines."""
    blocks = [render_attachment(a, markdown=markdown) for a in attachments]
    return "\n\n".join(block for block in blocks if block)
