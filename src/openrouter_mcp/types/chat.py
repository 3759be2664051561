"""Conversation turn types sent to the completion service."""

from __future__ import annotations

from typing import Any, Literal

# Type alias for chat messages
ChatMessage = dict[str, Any]

Role = Literal["system", "user"]

__all__ = ["ChatMessage", "Role", "system_message", "user_message"]


def system_message(content: str) -> ChatMessage:
    return {"role": "system", "content": content}


def user_message(content: str) -> ChatMessage:
    return {"role": "user", "content": content}
