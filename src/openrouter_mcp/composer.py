from __future__ import annotations

from typing import Optional, Sequence

from openrouter_mcp.context_files import FileBlock
from openrouter_mcp.types import ChatMessage, system_message, user_message

__all__ = ["resolve_system_prompt", "compose_user_content", "compose_messages"]

BLOCK_SEPARATOR = "\n\n"


def resolve_system_prompt(
    override: Optional[str], default: Optional[str] = None
) -> Optional[str]:
    """Explicit override wins, then the configured default; empty strings don't count."""
    if override:
        return override
    if default:
        return default
    return None


def compose_user_content(message: str, blocks: Sequence[FileBlock] = ()) -> str:
    """The request text followed by every file block, in order."""
    parts = [message]
    for block in blocks:
        parts.append(BLOCK_SEPARATOR)
        parts.append(block.render())
    return "".join(parts)


def compose_messages(
    message: str,
    blocks: Sequence[FileBlock] = (),
    system_prompt: Optional[str] = None,
) -> list[ChatMessage]:
    """
    Build the turn list: an optional system turn first, then exactly one
    user turn carrying the request text and any file blocks.
    """
    messages: list[ChatMessage] = []
    if system_prompt:
        messages.append(system_message(system_prompt))
    messages.append(user_message(compose_user_content(message, blocks)))
    return messages
