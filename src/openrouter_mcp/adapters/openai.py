"""OpenAI-compatible adapter for OpenRouter request/response transformations."""

from __future__ import annotations

from typing import Any

from openai.types.chat import ChatCompletion

from openrouter_mcp.response import ChatResponse
from openrouter_mcp.types import CompletionRequest

NO_RESPONSE_TEXT = "No response received"


class OpenRouterRequestAdapter:
    """Adapter for converting between `CompletionRequest` and the chat completions API."""

    def to_provider(self, request: CompletionRequest) -> dict[str, Any]:
        """Convert a request to ``chat.completions.create`` keyword arguments."""
        return request.as_dict()

    def from_provider(self, raw: ChatCompletion | None) -> ChatResponse:
        """Convert a chat completion to a `ChatResponse`.

        A response without choices or without text is not an error; it
        carries the fixed placeholder text instead.
        """
        content = None
        choices = getattr(raw, "choices", None)
        if choices:
            message = getattr(choices[0], "message", None)
            content = getattr(message, "content", None)
        return ChatResponse(content=content or NO_RESPONSE_TEXT, raw=raw)
